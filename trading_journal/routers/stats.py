"""Statistics and dashboard routes"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trading_journal.models.db import get_session
from trading_journal.schemas.stats import DashboardResponse, StatsResponse
from trading_journal.services.trade_service import TradeService

router = APIRouter(prefix="/api", tags=["Statistics"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(session: AsyncSession = Depends(get_session)):
    """Summary, performance extremes and per-symbol breakdown over all trades"""
    svc = TradeService(session)
    return StatsResponse(data=await svc.get_stats())


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(session: AsyncSession = Depends(get_session)):
    """Recent trades, overview totals and best symbols"""
    svc = TradeService(session)
    return DashboardResponse(data=await svc.get_dashboard())
