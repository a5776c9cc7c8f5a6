"""Journal trade record"""
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Column, String, Integer, DateTime, DECIMAL, Text, text, Index

from trading_journal.models.db import Base

# DECIMAL(20, 6) leaves 14 integer digits
MAX_STORABLE = Decimal("1e14")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching MySQL DATETIME semantics."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Trade(Base):
    __tablename__ = "trades"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    symbol = Column(String(32), nullable=False)
    trade_type = Column(String(8), nullable=False, default="LONG")
    entry_price = Column(DECIMAL(20, 6), nullable=False)
    exit_price = Column(DECIMAL(20, 6), nullable=False)
    quantity = Column(DECIMAL(20, 6), nullable=False)
    pnl = Column(DECIMAL(20, 6), nullable=True)
    pnl_percentage = Column(DECIMAL(20, 6), nullable=True)
    entry_date = Column(DateTime, nullable=True)
    exit_date = Column(DateTime, nullable=True)
    market_condition = Column(String(64), nullable=True)
    timeframe = Column(String(32), nullable=True)
    strategy = Column(String(128), nullable=True)
    notes = Column(Text, nullable=True)
    tags = Column(Text, nullable=True)
    emotional_state = Column(String(64), nullable=True)
    confidence = Column(Integer, nullable=True)
    rating = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime, server_default=text("CURRENT_TIMESTAMP"), onupdate=utcnow)

    __table_args__ = (
        Index("idx_trades_entry_date", "entry_date"),
        Index("idx_trades_symbol", "symbol"),
    )

    def as_row(self) -> dict:
        """Column name -> stored value, the raw storage shape."""
        return {c.name: getattr(self, c.key) for c in self.__table__.columns}
