"""Trade journal service: CRUD, statistics and dashboard over the trades table"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, Mapping, Optional, Union
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy import delete, desc, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trading_journal.core.config import settings
from trading_journal.core.errors import StorageError, TradeNotFoundError, TradeValidationError
from trading_journal.engine.pnl_calculator import TradeDirection, compute_pnl, to_decimal
from trading_journal.engine.trade_aggregator import TradeAggregator
from trading_journal.engine.trade_translator import (
    COLUMN_TO_FIELD,
    NUMERIC_COLUMNS,
    changed_columns,
    to_client_shape,
    to_storage_shape,
)
from trading_journal.models.trade import MAX_STORABLE, Trade, utcnow
from trading_journal.schemas.stats import DashboardView, TradeStats
from trading_journal.schemas.trade import TradeView

logger = logging.getLogger(__name__)

REQUIRED_CREATE_FIELDS = ("symbol", "entryPrice", "exitPrice", "quantity")
NON_NULLABLE_FIELDS = ("symbol", "tradeType", "entryPrice", "exitPrice", "quantity")
PNL_INPUT_FIELDS = ("entryPrice", "exitPrice", "quantity", "tradeType")

# Matches DECIMAL(20, 6)
STORAGE_QUANTUM = Decimal("0.000001")

Payload = Union[BaseModel, Mapping[str, Any]]


class TradeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_trades(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        symbol: Optional[str] = None,
        trade_type: Optional[str] = None,
    ) -> tuple[list[TradeView], int]:
        """Page of trades, most recent entry first, plus the filtered total."""
        limit = limit or settings.DEFAULT_PAGE_SIZE
        stmt = select(Trade)
        count_stmt = select(func.count(Trade.id))

        if symbol:
            stmt = stmt.where(Trade.symbol == symbol)
            count_stmt = count_stmt.where(Trade.symbol == symbol)
        if trade_type:
            stmt = stmt.where(Trade.trade_type == trade_type.upper())
            count_stmt = count_stmt.where(Trade.trade_type == trade_type.upper())

        stmt = (
            stmt.order_by(desc(Trade.entry_date), desc(Trade.created_at))
            .offset((page - 1) * limit)
            .limit(limit)
        )

        async with self._storage("fetch trades"):
            total_result = await self.session.execute(count_stmt)
            total = total_result.scalar() or 0
            result = await self.session.execute(stmt)
            trades = list(result.scalars().all())

        return [to_client_shape(t.as_row()) for t in trades], total

    async def get_trade(self, trade_id: str) -> TradeView:
        async with self._storage("fetch trade"):
            trade = await self._get_by_id(trade_id)
        if trade is None:
            raise TradeNotFoundError(trade_id)
        return to_client_shape(trade.as_row())

    async def create_trade(self, payload: Payload) -> TradeView:
        data = self._payload_dict(payload)
        missing = [f for f in REQUIRED_CREATE_FIELDS if data.get(f) is None]
        if missing:
            raise TradeValidationError(missing_fields=missing)

        if data.get("tradeType") is None:
            data["tradeType"] = TradeDirection.LONG.value
        now = utcnow()
        for field in ("entryDate", "exitDate"):
            if data.get(field) is None:
                data[field] = now

        row = to_storage_shape(data)
        self._apply_pnl(row)
        row["id"] = str(uuid4())

        trade = Trade(**row)
        async with self._storage("create trade"):
            self.session.add(trade)
            await self.session.commit()
            await self.session.refresh(trade)

        logger.info(f"Created trade {trade.id} {trade.symbol} {trade.trade_type} pnl={trade.pnl}")
        return to_client_shape(trade.as_row())

    async def update_trade(self, trade_id: str, payload: Payload) -> TradeView:
        """
        Partial overwrite: only the fields present in the payload are
        written. P&L is recomputed from the merged row whenever any of its
        inputs was supplied.
        """
        data = self._payload_dict(payload)
        nulled = [f for f in NON_NULLABLE_FIELDS if f in data and data[f] is None]
        if nulled:
            raise TradeValidationError(f"Fields cannot be null: {', '.join(nulled)}")

        async with self._storage("update trade"):
            trade = await self._get_by_id(trade_id)
            if trade is None:
                raise TradeNotFoundError(trade_id)

            before = trade.as_row()
            row = to_storage_shape(data, before)
            if any(f in data for f in PNL_INPUT_FIELDS):
                self._apply_pnl(row)

            changed = changed_columns(before, row)
            for column in changed:
                setattr(trade, column, row[column])
            trade.updated_at = utcnow()

            await self.session.commit()
            await self.session.refresh(trade)

        logger.info(f"Updated trade {trade_id}: {sorted(changed) or 'no field changes'}")
        return to_client_shape(trade.as_row())

    async def delete_trade(self, trade_id: str) -> None:
        async with self._storage("delete trade"):
            result = await self.session.execute(delete(Trade).where(Trade.id == trade_id))
            await self.session.commit()
        if not result.rowcount:
            raise TradeNotFoundError(trade_id)
        logger.info(f"Deleted trade {trade_id}")

    async def get_stats(self) -> TradeStats:
        trades = await self._load_all("fetch statistics")
        return TradeAggregator.summarize(trades)

    async def get_dashboard(self) -> DashboardView:
        stmt = (
            select(Trade)
            .order_by(desc(Trade.entry_date), desc(Trade.created_at))
            .limit(settings.DASHBOARD_RECENT_LIMIT)
        )
        async with self._storage("fetch dashboard"):
            result = await self.session.execute(stmt)
            recent = [to_client_shape(t.as_row()) for t in result.scalars().all()]
        trades = await self._load_all("fetch dashboard")
        return TradeAggregator.build_dashboard(recent, trades, top_n=settings.DASHBOARD_TOP_SYMBOLS)

    async def count_trades(self) -> int:
        async with self._storage("count trades"):
            result = await self.session.execute(select(func.count(Trade.id)))
        return result.scalar() or 0

    async def ping(self) -> bool:
        try:
            await self.session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            await self.session.rollback()
            return False

    @staticmethod
    def _payload_dict(payload: Payload) -> dict[str, Any]:
        if isinstance(payload, BaseModel):
            return payload.model_dump(by_alias=True, exclude_unset=True)
        return dict(payload)

    @staticmethod
    def _apply_pnl(row: dict[str, Any]) -> None:
        result = compute_pnl(row["entry_price"], row["exit_price"], row["quantity"], row["trade_type"])
        row["pnl"] = result.pnl
        row["pnl_percentage"] = result.pnl_percentage

        too_large = [
            COLUMN_TO_FIELD[c] for c in NUMERIC_COLUMNS
            if row.get(c) is not None and abs(to_decimal(row[c])) >= MAX_STORABLE
        ]
        if too_large:
            raise TradeValidationError(f"Values out of storable range: {', '.join(too_large)}")

        row["pnl"] = row["pnl"].quantize(STORAGE_QUANTUM)
        row["pnl_percentage"] = row["pnl_percentage"].quantize(STORAGE_QUANTUM)

    async def _load_all(self, action: str) -> list[TradeView]:
        async with self._storage(action):
            result = await self.session.execute(select(Trade))
            trades = list(result.scalars().all())
        return [to_client_shape(t.as_row()) for t in trades]

    async def _get_by_id(self, trade_id: str) -> Optional[Trade]:
        stmt = select(Trade).where(Trade.id == trade_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    @asynccontextmanager
    async def _storage(self, action: str):
        """Roll back and re-raise database failures as StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise StorageError(f"Failed to {action}", detail=str(e)) from e
