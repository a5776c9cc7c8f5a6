"""Health check with database reachability"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import ORJSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from trading_journal.core.config import settings
from trading_journal.core.errors import JournalError
from trading_journal.models.db import get_session
from trading_journal.services.trade_service import TradeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Service status, database connectivity and current trade count."""
    svc = TradeService(session)
    try:
        connected = await svc.ping()
        trades_count = await svc.count_trades()
    except JournalError as e:
        logger.error(f"Health check failed: {e}")
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "unhealthy", "error": "Database error"},
        )

    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if connected else "disconnected",
        "tradesCount": trades_count,
        "mode": settings.DB_TYPE,
    }
