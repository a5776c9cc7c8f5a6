from decimal import Decimal

import pytest

from trading_journal.engine.pnl_calculator import PnLResult, TradeDirection, compute_pnl


def test_long_trade_scenario():
    result = compute_pnl(100, 110, 2, TradeDirection.LONG)
    assert isinstance(result, PnLResult)
    assert result.pnl == Decimal("20")
    assert result.pnl_percentage == Decimal("10")


def test_short_trade_scenario_is_exact_for_float_prices():
    result = compute_pnl(1.10, 1.05, 1000, "SHORT")
    assert result.pnl == Decimal("50")
    assert float(result.pnl_percentage) == pytest.approx(4.545, abs=1e-3)


@pytest.mark.parametrize("entry,exit_,qty", [
    (100, 110, 2),
    (50, 40, 3),
    ("12.5", "12.75", "8"),
    (0.5, 0.5, 10),
])
def test_direction_only_flips_sign(entry, exit_, qty):
    long_ = compute_pnl(entry, exit_, qty, "LONG")
    short = compute_pnl(entry, exit_, qty, "SHORT")
    expected = (Decimal(str(exit_)) - Decimal(str(entry))) * Decimal(str(qty))
    assert long_.pnl == expected
    assert short.pnl == -expected
    assert short.pnl_percentage == -long_.pnl_percentage


@pytest.mark.parametrize("direction", ["LONG", "SHORT"])
def test_zero_entry_price_gives_zero_percentage(direction):
    result = compute_pnl(0, 25, 4, direction)
    assert result.pnl_percentage == 0
    assert abs(result.pnl) == Decimal("100")


def test_direction_is_case_insensitive():
    assert compute_pnl(10, 8, 1, "short").pnl == Decimal("2")


def test_flat_short_is_not_negative_zero():
    result = compute_pnl(10, 10, 5, "SHORT")
    assert str(result.pnl) == "0"
    assert not result.pnl.is_signed()
