import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fintrack.config import CORS_ORIGINS
from fintrack.database import init_db
from fintrack.money import data_quality_stats
from fintrack.routes.account_routes import router as account_router
from fintrack.routes.category_routes import router as category_router
from fintrack.routes.transaction_routes import router as transaction_router
from fintrack.routes.scheduled_transaction_routes import router as scheduled_transaction_router
from fintrack.routes.chat_routes import router as chat_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await init_db()
    except Exception as e:
        # The tables may be managed by migrations with a user lacking CREATE privileges
        logger.error(f"Database init skipped or failed: {e}")
    yield


app = FastAPI(title="Fintrack", lifespan=lifespan)


@app.get("/api/health-check")
async def health():
    return {"status": "ok", "data_quality": data_quality_stats()}


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(account_router)
app.include_router(category_router)
app.include_router(transaction_router)
app.include_router(scheduled_transaction_router)
app.include_router(chat_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fintrack.main:app", host="0.0.0.0", port=8000, reload=True)
