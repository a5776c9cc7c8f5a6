"""Statistics and dashboard schemas"""
from pydantic import BaseModel, ConfigDict, Field

from trading_journal.schemas.trade import TradeView


class SummaryStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_trades: int = Field(0, alias="totalTrades")
    winning_trades: int = Field(0, alias="winningTrades")
    losing_trades: int = Field(0, alias="losingTrades")
    total_pnl: float = Field(0.0, alias="totalPnL")
    win_rate: float = Field(0.0, alias="winRate")
    avg_win: float = Field(0.0, alias="avgWin")
    avg_loss: float = Field(0.0, alias="avgLoss")
    profit_factor: float = Field(0.0, alias="profitFactor")


class PerformanceStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    best_trade: float = Field(0.0, alias="bestTrade")
    worst_trade: float = Field(0.0, alias="worstTrade")
    largest_win: float = Field(0.0, alias="largestWin")
    largest_loss: float = Field(0.0, alias="largestLoss")


class SymbolStats(BaseModel):
    trades: int = 0
    pnl: float = 0.0
    wins: int = 0


class TradeStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: SummaryStats = Field(default_factory=SummaryStats)
    performance: PerformanceStats = Field(default_factory=PerformanceStats)
    by_symbol: dict[str, SymbolStats] = Field(default_factory=dict, alias="bySymbol")


class SymbolPnL(BaseModel):
    symbol: str
    pnl: float


class DashboardOverview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_trades: int = Field(0, alias="totalTrades")
    total_pnl: float = Field(0.0, alias="totalPnL")
    win_rate: float = Field(0.0, alias="winRate")


class DashboardView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recent_trades: list[TradeView] = Field(default_factory=list, alias="recentTrades")
    overview: DashboardOverview = Field(default_factory=DashboardOverview)
    top_symbols: list[SymbolPnL] = Field(default_factory=list, alias="topSymbols")


class StatsResponse(BaseModel):
    success: bool = True
    data: TradeStats


class DashboardResponse(BaseModel):
    success: bool = True
    data: DashboardView
