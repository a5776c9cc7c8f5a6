"""
Row <-> client translation for journal trades

The storage row uses snake_case columns, a comma-joined ``tags`` string and
native DECIMAL/DATETIME values. The client shape uses camelCase fields,
floats, ISO-8601 strings and a tag array. This module is the only place the
two meet.

Partial updates are expressed as a mapping that holds only the fields the
caller sent: a missing key keeps the stored value, a key set to ``None``
clears it, any other value replaces it.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional

from trading_journal.engine.pnl_calculator import to_decimal
from trading_journal.schemas.trade import TAG_DELIMITER, TradeView

logger = logging.getLogger(__name__)

# client field -> storage column
FIELD_TO_COLUMN = {
    "id": "id",
    "symbol": "symbol",
    "tradeType": "trade_type",
    "entryPrice": "entry_price",
    "exitPrice": "exit_price",
    "quantity": "quantity",
    "pnl": "pnl",
    "pnlPercentage": "pnl_percentage",
    "entryDate": "entry_date",
    "exitDate": "exit_date",
    "marketCondition": "market_condition",
    "timeframe": "timeframe",
    "strategy": "strategy",
    "notes": "notes",
    "tags": "tags",
    "emotionalState": "emotional_state",
    "confidence": "confidence",
    "rating": "rating",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
COLUMN_TO_FIELD = {v: k for k, v in FIELD_TO_COLUMN.items()}

NUMERIC_COLUMNS = ("entry_price", "exit_price", "quantity", "pnl", "pnl_percentage")
INTEGER_COLUMNS = ("confidence", "rating")
DATE_COLUMNS = ("entry_date", "exit_date", "created_at", "updated_at")
# Server-managed: never written from a client payload
READ_ONLY_FIELDS = ("id", "pnl", "pnlPercentage", "createdAt", "updatedAt")


def to_number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        logger.warning(f"Non-numeric stored value {value!r}, using 0")
        return 0.0


def to_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None
    return parsed or None


def decode_tags(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        segments = value
    else:
        segments = str(value).split(TAG_DELIMITER)
    return [s.strip() for s in segments if str(s).strip()]


def encode_tags(tags: Any) -> Optional[str]:
    if tags is None:
        return None
    if isinstance(tags, str):
        return tags
    return TAG_DELIMITER.join(str(t).strip() for t in tags)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Best-effort parse; returns None for anything unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_iso(value: Any) -> Optional[str]:
    """UTC ISO-8601 with millisecond precision and a Z suffix, or None."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    else:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_storage_datetime(value: Any) -> Optional[datetime]:
    """Naive UTC for DATETIME columns."""
    parsed = parse_datetime(value)
    if parsed is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_client_shape(row: Mapping[str, Any]) -> TradeView:
    client: dict[str, Any] = {}
    for column, field in COLUMN_TO_FIELD.items():
        value = row.get(column)
        if column in NUMERIC_COLUMNS:
            value = to_number(value)
        elif column in INTEGER_COLUMNS:
            value = to_optional_int(value)
        elif column in DATE_COLUMNS:
            value = format_iso(value)
        elif column == "tags":
            value = decode_tags(value)
        elif column == "id" and value is not None:
            value = str(value)
        client[field] = value
    return TradeView.model_validate(client)


def _storage_value(column: str, value: Any) -> Any:
    if value is None:
        return None
    if column in NUMERIC_COLUMNS:
        return to_decimal(value)
    if column in INTEGER_COLUMNS:
        return to_optional_int(value)
    if column in DATE_COLUMNS:
        return to_storage_datetime(value)
    if column == "tags":
        return encode_tags(value)
    if column == "trade_type":
        return str(getattr(value, "value", value)).upper()
    return value


def to_storage_shape(payload: Mapping[str, Any], existing: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
    """
    Merge a client-shaped payload over an existing storage row.

    Only keys present in ``payload`` are written; unknown keys and
    server-managed fields are ignored.
    """
    row = dict(existing) if existing is not None else {}
    for field, value in payload.items():
        column = FIELD_TO_COLUMN.get(field)
        if column is None or field in READ_ONLY_FIELDS:
            continue
        row[column] = _storage_value(column, value)
    return row


def changed_columns(before: Mapping[str, Any], after: Mapping[str, Any]) -> set[str]:
    return {k for k, v in after.items() if before.get(k) != v}
