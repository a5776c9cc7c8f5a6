import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from trading_journal.core.config import settings
from trading_journal.core.errors import register_error_handlers
from trading_journal.core.logging_config import setup_logging
from trading_journal.models.db import engine, ensure_tables, check_connection
from trading_journal.routers import health, stats, trades

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and probe the database at startup, release the pool at shutdown"""
    if settings.AUTO_CREATE_TABLES:
        try:
            await ensure_tables()
        except Exception as e:
            logger.error(f"Failed to ensure tables: {e}")

    connected = await check_connection()
    database = settings.DB_NAME if settings.DB_TYPE == "mysql" else settings.SQLITE_PATH
    logger.info(
        f"{settings.APP_NAME} v{settings.APP_VERSION} started | database={database} ({settings.DB_TYPE}) | "
        f"{'connected' if connected else 'connection failed'}"
    )

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1024)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(trades.router)
app.include_router(stats.router)


@app.get("/", tags=["Root"])
async def root():
    """API information."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "online",
        "mode": settings.DB_TYPE,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
