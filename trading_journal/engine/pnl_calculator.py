"""
P&L calculator for closed journal trades

pnl            = (exit - entry) * quantity
pnl_percentage = (exit - entry) / entry * 100   (0 when entry <= 0)

SHORT trades negate both values.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Union

Number = Union[Decimal, float, int, str]


class TradeDirection(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


@dataclass(frozen=True)
class PnLResult:
    pnl: Decimal
    pnl_percentage: Decimal


def to_decimal(value: Number) -> Decimal:
    """Coerce through str so float inputs like 1.10 stay exact."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal(0)


def compute_pnl(
    entry_price: Number,
    exit_price: Number,
    quantity: Number,
    direction: Union[TradeDirection, str] = TradeDirection.LONG,
) -> PnLResult:
    entry = to_decimal(entry_price)
    exit_ = to_decimal(exit_price)
    qty = to_decimal(quantity)

    move = exit_ - entry
    pnl = move * qty
    pnl_percentage = move / entry * 100 if entry > 0 else Decimal(0)

    if str(getattr(direction, "value", direction)).upper() == TradeDirection.SHORT.value:
        # 0 - x rather than -x so a flat short stays 0, not -0
        pnl, pnl_percentage = Decimal(0) - pnl, Decimal(0) - pnl_percentage

    return PnLResult(pnl=pnl, pnl_percentage=pnl_percentage)
