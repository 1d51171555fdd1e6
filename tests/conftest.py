import asyncio
import os
import tempfile
from datetime import datetime, timedelta, timezone

# Point the app at a throwaway database before anything imports fintrack
_DB_DIR = tempfile.mkdtemp(prefix="fintrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["ROLLOVER_ON_LIST"] = "true"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from fintrack import config
from fintrack.database import SessionLocal, drop_db, init_db
from fintrack.main import app
from fintrack.money import reset_data_quality_stats

TEST_SECRET = "test-secret"


def make_token(user_id: str, **claims) -> str:
    payload = {"sub": user_id, "exp": datetime.now(timezone.utc) + timedelta(hours=1), **claims}
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


def auth_headers(user_id: str = "user-1") -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def run_db(fn):
    """Run ``fn(db)`` against a fresh session on a new event loop."""
    async def _go():
        async with SessionLocal() as db:
            return await fn(db)
    return asyncio.run(_go())


@pytest.fixture(autouse=True)
def fresh_db(monkeypatch):
    monkeypatch.setattr(config, "AUTH_JWT_SECRET", TEST_SECRET)
    monkeypatch.setattr(config, "AUTH_JWT_ALGORITHMS", ["HS256"])
    monkeypatch.setattr(config, "AUTH_JWT_AUDIENCE", None)
    monkeypatch.setattr(config, "AUTH_JWT_ISSUER", None)
    asyncio.run(drop_db())
    asyncio.run(init_db())
    reset_data_quality_stats()
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def headers():
    return auth_headers("user-1")


@pytest.fixture
def other_headers():
    return auth_headers("user-2")
