import logging
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from trading_journal.core.errors import StorageError, TradeNotFoundError, TradeValidationError
from trading_journal.core.logging_config import resolve_level
from trading_journal.services.trade_service import TradeService


class RecordingSession:
    def __init__(self):
        self.rollbacks = 0

    async def rollback(self):
        self.rollbacks += 1


@pytest.mark.asyncio
async def test_sqlalchemy_error_rolls_back_and_becomes_storage_error():
    session = RecordingSession()
    svc = TradeService(session)

    with pytest.raises(StorageError) as exc_info:
        async with svc._storage("update trade"):
            raise OperationalError("UPDATE trades", {}, Exception("deadlock"))

    assert session.rollbacks == 1
    assert exc_info.value.message == "Failed to update trade"
    assert exc_info.value.status_code == 500
    assert "deadlock" in exc_info.value.detail
    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_domain_errors_pass_through_without_rollback():
    session = RecordingSession()
    svc = TradeService(session)

    with pytest.raises(TradeNotFoundError):
        async with svc._storage("fetch trade"):
            raise TradeNotFoundError("abc")

    assert session.rollbacks == 0


def _row(**overrides):
    row = {
        "trade_type": "LONG",
        "entry_price": Decimal("100"),
        "exit_price": Decimal("110"),
        "quantity": Decimal("2"),
    }
    row.update(overrides)
    return row


def test_apply_pnl_quantizes_to_column_scale():
    row = _row(entry_price=Decimal("3"), exit_price=Decimal("4"), quantity=Decimal("1"))
    TradeService._apply_pnl(row)
    assert row["pnl"] == Decimal("1.000000")
    assert row["pnl_percentage"] == Decimal("33.333333")


@pytest.mark.parametrize(
    "overrides, fields",
    [
        ({"entry_price": Decimal("1e30"), "exit_price": Decimal("2e30")}, "entryPrice, exitPrice, pnl"),
        ({"entry_price": Decimal("1"), "exit_price": Decimal("9e13"), "quantity": Decimal("9e13")}, "pnl, pnlPercentage"),
        ({"entry_price": Decimal("0.000001"), "exit_price": Decimal("1e9"), "quantity": Decimal("1")}, "pnlPercentage"),
    ],
)
def test_apply_pnl_rejects_values_the_column_cannot_hold(overrides, fields):
    with pytest.raises(TradeValidationError) as exc_info:
        TradeService._apply_pnl(_row(**overrides))
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == f"Values out of storable range: {fields}"


@pytest.mark.parametrize(
    "level, expected",
    [(logging.DEBUG, logging.DEBUG), ("warning", logging.WARNING), ("ERROR", logging.ERROR), ("chatty", logging.INFO)],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected
