import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from trading_journal.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# SQLite gets the default pool; MySQL needs pre-ping and recycling
engine_kwargs = {
    "echo": False,
    "future": True,
}

if make_url(settings.DATABASE_URL).get_backend_name() == "mysql":
    engine_kwargs.update({
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    })

engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)

SessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Per-request database session dependency."""
    async with SessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def ensure_tables() -> None:
    """Create missing tables at startup."""
    # Register the model on Base.metadata
    from trading_journal.models.trade import Trade  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
