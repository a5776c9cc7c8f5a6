"""Trade request/response schemas (camelCase on the wire)"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trading_journal.engine.pnl_calculator import TradeDirection
from trading_journal.models.trade import MAX_STORABLE

TAG_DELIMITER = ","


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TradePayload(BaseModel):
    """
    Fields a client may send for a trade.

    Every field is optional at the schema level: presence of the required
    create fields is checked by TradeService so the error lists all missing
    names at once. Which fields were actually sent is read back through
    ``model_dump(exclude_unset=True)``.
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    symbol: Optional[str] = Field(None, max_length=32, description="Instrument, e.g. BTC/USDT")
    trade_type: Optional[TradeDirection] = Field(None, alias="tradeType", description="LONG or SHORT")
    entry_price: Optional[Decimal] = Field(None, ge=0, lt=MAX_STORABLE, alias="entryPrice")
    exit_price: Optional[Decimal] = Field(None, ge=0, lt=MAX_STORABLE, alias="exitPrice")
    quantity: Optional[Decimal] = Field(None, ge=0, lt=MAX_STORABLE)
    entry_date: Optional[datetime] = Field(None, alias="entryDate")
    exit_date: Optional[datetime] = Field(None, alias="exitDate")
    market_condition: Optional[str] = Field(None, max_length=64, alias="marketCondition")
    timeframe: Optional[str] = Field(None, max_length=32)
    strategy: Optional[str] = Field(None, max_length=128)
    notes: Optional[str] = None
    tags: Optional[list[str]] = None
    emotional_state: Optional[str] = Field(None, max_length=64, alias="emotionalState")
    confidence: Optional[int] = Field(None, ge=1, le=10, description="Self-reported, 1-10")
    rating: Optional[int] = Field(None, ge=1, le=5, description="Self-reported, 1-5")

    @field_validator("symbol", mode="before")
    @classmethod
    def _strip_symbol(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("trade_type", mode="before")
    @classmethod
    def _upper_trade_type(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("entry_price", "exit_price", "quantity", "entry_date", "exit_date", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tag_string(cls, value: Any) -> Any:
        # A plain string is taken as an already comma-joined tag list
        if isinstance(value, str):
            return value.split(TAG_DELIMITER)
        return value

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        cleaned = []
        for tag in value:
            tag = tag.strip()
            if not tag:
                continue
            if TAG_DELIMITER in tag:
                raise ValueError(f"tag {tag!r} must not contain {TAG_DELIMITER!r}")
            cleaned.append(tag)
        return cleaned

    @field_validator("confidence", "rating", mode="before")
    @classmethod
    def _parse_int_or_null(cls, value: Any) -> Optional[int]:
        """Numeric input is truncated to int; non-numeric, empty or 0 is null."""
        if value is None or isinstance(value, bool):
            return None
        try:
            parsed = int(float(str(value).strip()))
        except (ValueError, OverflowError):
            return None
        return parsed or None


class TradeCreateRequest(TradePayload):
    pass


class TradeUpdateRequest(TradePayload):
    pass


class TradeView(BaseModel):
    """Client-facing trade."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    symbol: Optional[str] = None
    trade_type: Optional[str] = Field(None, alias="tradeType")
    entry_price: float = Field(0.0, alias="entryPrice")
    exit_price: float = Field(0.0, alias="exitPrice")
    quantity: float = 0.0
    pnl: float = 0.0
    pnl_percentage: float = Field(0.0, alias="pnlPercentage")
    entry_date: Optional[str] = Field(None, alias="entryDate")
    exit_date: Optional[str] = Field(None, alias="exitDate")
    market_condition: Optional[str] = Field(None, alias="marketCondition")
    timeframe: Optional[str] = None
    strategy: Optional[str] = None
    notes: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    emotional_state: Optional[str] = Field(None, alias="emotionalState")
    confidence: Optional[int] = None
    rating: Optional[int] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TradeListResponse(BaseModel):
    success: bool = True
    count: int = 0
    pagination: Pagination
    data: list[TradeView] = []


class TradeResponse(BaseModel):
    success: bool = True
    data: TradeView


class TradeMutationResponse(BaseModel):
    success: bool = True
    message: str
    data: TradeView
