import pytest

from trading_journal.engine.trade_aggregator import TradeAggregator
from trading_journal.schemas.stats import TradeStats
from trading_journal.schemas.trade import TradeView


def _trade(symbol: str, pnl: float, n: int = 0) -> TradeView:
    return TradeView(id=f"{symbol}-{n}-{pnl}", symbol=symbol, trade_type="LONG", pnl=pnl)


def test_empty_input_is_all_zero():
    stats = TradeAggregator.summarize([])
    assert isinstance(stats, TradeStats)
    assert stats.summary.model_dump() == {
        "total_trades": 0,
        "winning_trades": 0,
        "losing_trades": 0,
        "total_pnl": 0.0,
        "win_rate": 0.0,
        "avg_win": 0.0,
        "avg_loss": 0.0,
        "profit_factor": 0.0,
    }
    assert stats.performance.best_trade == 0
    assert stats.performance.largest_loss == 0
    assert stats.by_symbol == {}


def test_counts_and_averages():
    trades = [
        _trade("AAPL", 200.0, 1),
        _trade("AAPL", -50.0, 2),
        _trade("MSFT", 100.0, 3),
        _trade("MSFT", -50.0, 4),
        _trade("TSLA", 0.0, 5),
    ]
    s = TradeAggregator.summarize(trades).summary
    assert s.total_trades == 5
    assert s.winning_trades == 2
    assert s.losing_trades == 2
    assert s.total_pnl == pytest.approx(200.0)
    assert s.win_rate == pytest.approx(40.0)
    assert s.avg_win == pytest.approx(150.0)
    assert s.avg_loss == pytest.approx(-50.0)
    assert s.profit_factor == pytest.approx(3.0)


def test_profit_factor_without_losses_is_gross_winnings():
    trades = [_trade("AAPL", 100.0, 1), _trade("AAPL", 50.0, 2)]
    assert TradeAggregator.summarize(trades).summary.profit_factor == pytest.approx(150.0)


def test_performance_extremes():
    trades = [_trade("A", 30.0), _trade("B", -10.0), _trade("C", -40.0), _trade("D", 5.0)]
    p = TradeAggregator.summarize(trades).performance
    assert p.best_trade == 30.0
    assert p.worst_trade == -40.0
    assert p.largest_win == 30.0
    assert p.largest_loss == -40.0


def test_only_losers_have_no_largest_win():
    p = TradeAggregator.summarize([_trade("A", -5.0), _trade("B", -1.0)]).performance
    assert p.best_trade == -1.0
    assert p.largest_win == 0.0
    assert p.largest_loss == -5.0


def test_by_symbol_breakdown():
    trades = [_trade("AAPL", 10.0, 1), _trade("AAPL", -4.0, 2), _trade("AAPL", 6.0, 3), _trade("EUR/USD", 50.0, 4)]
    by_symbol = TradeAggregator.summarize(trades).by_symbol
    assert set(by_symbol) == {"AAPL", "EUR/USD"}
    assert by_symbol["AAPL"].trades == 3
    assert by_symbol["AAPL"].pnl == pytest.approx(12.0)
    assert by_symbol["AAPL"].wins == 2
    assert by_symbol["EUR/USD"].model_dump() == {"trades": 1, "pnl": 50.0, "wins": 1}


def test_stats_wire_names():
    data = TradeAggregator.summarize([_trade("AAPL", 1.0)]).model_dump(by_alias=True)
    assert set(data) == {"summary", "performance", "bySymbol"}
    assert "totalPnL" in data["summary"]
    assert "profitFactor" in data["summary"]
    assert "largestLoss" in data["performance"]


def test_dashboard_top_symbols_and_overview():
    trades = [
        _trade("AAPL", 10.0, 1),
        _trade("MSFT", 40.0, 2),
        _trade("TSLA", -20.0, 3),
        _trade("NVDA", 25.0, 4),
        _trade("AAPL", 20.0, 5),
    ]
    dashboard = TradeAggregator.build_dashboard(trades[:2], trades, top_n=3)
    assert [s.symbol for s in dashboard.top_symbols] == ["MSFT", "AAPL", "NVDA"]
    assert dashboard.top_symbols[1].pnl == pytest.approx(30.0)
    assert dashboard.overview.total_trades == 5
    assert dashboard.overview.total_pnl == pytest.approx(75.0)
    assert dashboard.overview.win_rate == pytest.approx(80.0)
    assert len(dashboard.recent_trades) == 2


def test_empty_dashboard():
    dashboard = TradeAggregator.build_dashboard([], [])
    assert dashboard.recent_trades == []
    assert dashboard.top_symbols == []
    assert dashboard.overview.win_rate == 0.0
