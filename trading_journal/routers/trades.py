"""Trade CRUD routes"""
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from trading_journal.core.config import settings
from trading_journal.models.db import get_session
from trading_journal.schemas.trade import (
    Pagination,
    TradeCreateRequest,
    TradeListResponse,
    TradeMutationResponse,
    TradeResponse,
    TradeUpdateRequest,
)
from trading_journal.services.trade_service import TradeService

router = APIRouter(prefix="/api/trades", tags=["Trades"])


@router.get("", response_model=TradeListResponse)
async def list_trades(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    symbol: Optional[str] = Query(None, description="Filter by symbol"),
    trade_type: Optional[str] = Query(None, alias="tradeType", pattern="(?i)^(long|short)$"),
    session: AsyncSession = Depends(get_session),
):
    """List trades, most recent entry first"""
    svc = TradeService(session)
    trades, total = await svc.list_trades(page, limit, symbol, trade_type)
    return TradeListResponse(
        count=total,
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
        data=trades,
    )


@router.get("/{trade_id}", response_model=TradeResponse)
async def get_trade(trade_id: str, session: AsyncSession = Depends(get_session)):
    svc = TradeService(session)
    return TradeResponse(data=await svc.get_trade(trade_id))


@router.post("", response_model=TradeMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_trade(payload: TradeCreateRequest, session: AsyncSession = Depends(get_session)):
    """Record a closed trade; P&L is computed server side"""
    svc = TradeService(session)
    trade = await svc.create_trade(payload)
    return TradeMutationResponse(message="Trade recorded successfully", data=trade)


@router.put("/{trade_id}", response_model=TradeMutationResponse)
async def update_trade(trade_id: str, payload: TradeUpdateRequest, session: AsyncSession = Depends(get_session)):
    """Partial update: omitted fields keep their stored value, explicit null clears"""
    svc = TradeService(session)
    trade = await svc.update_trade(trade_id, payload)
    return TradeMutationResponse(message="Trade updated successfully", data=trade)


@router.delete("/{trade_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_trade(trade_id: str, session: AsyncSession = Depends(get_session)):
    svc = TradeService(session)
    await svc.delete_trade(trade_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
