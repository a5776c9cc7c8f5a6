"""
Shared fixtures.

Every test gets its own SQLite file. The schema is created with a plain
sync engine; the app and the service talk to it through aiosqlite.
"""
import os
import tempfile
from pathlib import Path

# Must be set before trading_journal.core.config is imported
_BOOTSTRAP_DIR = Path(tempfile.mkdtemp(prefix="trading_journal_tests_"))
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_BOOTSTRAP_DIR / 'bootstrap.db'}"
os.environ["ENVIRONMENT"] = "production"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from trading_journal.main import app
from trading_journal.models.db import Base, get_session
from trading_journal.models.trade import Trade  # noqa: F401


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "journal.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def session_factory(db_path):
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(test_engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def btc_long():
    return {
        "symbol": "BTC/USDT",
        "tradeType": "LONG",
        "entryPrice": 100,
        "exitPrice": 110,
        "quantity": 2,
        "entryDate": "2024-01-15T10:30:00Z",
        "exitDate": "2024-01-16T09:00:00Z",
        "strategy": "breakout",
        "tags": ["momentum", "crypto"],
        "emotionalState": "calm",
        "confidence": 7,
        "rating": 4,
    }


@pytest.fixture
def eurusd_short():
    return {
        "symbol": "EUR/USD",
        "tradeType": "SHORT",
        "entryPrice": 1.10,
        "exitPrice": 1.05,
        "quantity": 1000,
        "entryDate": "2024-02-01T08:00:00Z",
        "exitDate": "2024-02-01T16:00:00Z",
    }
