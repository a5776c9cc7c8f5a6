"""
Trade aggregation - journal-level performance metrics

- Win rate / average win / average loss
- Profit factor
- Best / worst trade
- Per-symbol breakdown
- Dashboard overview and top symbols
"""
from typing import Iterable, List, Sequence

from trading_journal.schemas.stats import (
    DashboardOverview,
    DashboardView,
    PerformanceStats,
    SummaryStats,
    SymbolPnL,
    SymbolStats,
    TradeStats,
)
from trading_journal.schemas.trade import TradeView


class TradeAggregator:
    """Pure statistics over client-shaped trades."""

    @staticmethod
    def win_rate(trades: Sequence[TradeView]) -> float:
        if not trades:
            return 0.0
        wins = sum(1 for t in trades if t.pnl > 0)
        return wins / len(trades) * 100

    @staticmethod
    def profit_factor(winning_pnls: List[float], losing_pnls: List[float]) -> float:
        """
        |sum(wins) / sum(losses)|

        With no losing trades the summed winnings are returned as-is, so a
        journal with only winners reports its gross profit here.
        """
        gross_win = sum(winning_pnls)
        if losing_pnls:
            return abs(gross_win / sum(losing_pnls))
        return gross_win

    @staticmethod
    def summarize(trades: Iterable[TradeView]) -> TradeStats:
        trades = list(trades)
        if not trades:
            return TradeStats()

        pnls = [t.pnl for t in trades]
        winning = [p for p in pnls if p > 0]
        losing = [p for p in pnls if p < 0]

        summary = SummaryStats(
            total_trades=len(trades),
            winning_trades=len(winning),
            losing_trades=len(losing),
            total_pnl=sum(pnls),
            win_rate=TradeAggregator.win_rate(trades),
            avg_win=sum(winning) / len(winning) if winning else 0.0,
            avg_loss=sum(losing) / len(losing) if losing else 0.0,
            profit_factor=TradeAggregator.profit_factor(winning, losing),
        )
        performance = PerformanceStats(
            best_trade=max(pnls),
            worst_trade=min(pnls),
            largest_win=max(winning) if winning else 0.0,
            largest_loss=min(losing) if losing else 0.0,
        )

        by_symbol: dict[str, SymbolStats] = {}
        for t in trades:
            entry = by_symbol.setdefault(t.symbol, SymbolStats())
            entry.trades += 1
            entry.pnl += t.pnl
            if t.pnl > 0:
                entry.wins += 1

        return TradeStats(summary=summary, performance=performance, by_symbol=by_symbol)

    @staticmethod
    def top_symbols(trades: Iterable[TradeView], limit: int = 3) -> List[SymbolPnL]:
        totals: dict[str, float] = {}
        for t in trades:
            totals[t.symbol] = totals.get(t.symbol, 0.0) + t.pnl
        ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
        return [SymbolPnL(symbol=s, pnl=p) for s, p in ranked[:limit]]

    @staticmethod
    def build_dashboard(
        recent_trades: Sequence[TradeView],
        trades: Sequence[TradeView],
        top_n: int = 3,
    ) -> DashboardView:
        overview = DashboardOverview(
            total_trades=len(trades),
            total_pnl=sum(t.pnl for t in trades),
            win_rate=TradeAggregator.win_rate(trades),
        )
        return DashboardView(
            recent_trades=list(recent_trades),
            overview=overview,
            top_symbols=TradeAggregator.top_symbols(trades, top_n),
        )
