"""
Database initialization script

Creates the trades table (and its indexes) for the configured database.
Usage: python -m scripts.init_db  (from the repo root, or anywhere after pip install -e .)
"""
import asyncio
import logging

from trading_journal.core.config import settings
from trading_journal.core.logging_config import setup_logging
from trading_journal.models.db import Base, engine
from trading_journal.models.trade import Trade  # noqa: F401

logger = logging.getLogger(__name__)


async def init_database():
    # Hide credentials in the log line
    logger.info(f"Initializing database ({settings.DB_TYPE}) at {settings.DATABASE_URL.split('@')[-1]}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")
    await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_database())
