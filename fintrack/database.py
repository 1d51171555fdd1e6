import os
import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from fintrack.config import DATABASE_URL, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# SQLite connections must not outlive the event loop that opened them
engine_args = {}
if DATABASE_URL.startswith("sqlite"):
    engine_args["poolclass"] = NullPool
else:
    # Production settings for PostgreSQL
    engine_args.update({
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
    })

try:
    engine = create_async_engine(DATABASE_URL, **engine_args, echo=False)
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
except Exception as e:
    logger.error(f"Failed to create engine: {e}")
    raise e

if DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # ON DELETE CASCADE / SET NULL are only enforced with this pragma
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

Base = declarative_base()


async def get_db():
    """FastAPI dependency — yields an async database session and closes it after use."""
    async with SessionLocal() as db:
        yield db


async def init_db():
    """Create the data/ directory if needed, then create all tables."""
    if DATABASE_URL.startswith("sqlite") and "/./data/" in DATABASE_URL:
        os.makedirs("data", exist_ok=True)

    # Import all models so they register with Base.metadata
    import fintrack.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized successfully.")


async def drop_db():
    """Drop every table. Used by the test-suite to reset state."""
    import fintrack.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
