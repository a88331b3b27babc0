"""Analytics: backtest statistics (win rate, profit factor, exit mix, drawdown) and verdicts."""

from market_engine.analytics.metrics import (
    BacktestStats,
    compute_backtest_stats,
    equity_curve,
    max_drawdown,
    win_rate,
    profit_factor,
)
from market_engine.analytics.insights import Verdict, strategy_insights, strategy_verdict

__all__ = [
    "BacktestStats",
    "compute_backtest_stats",
    "equity_curve",
    "max_drawdown",
    "win_rate",
    "profit_factor",
    "Verdict",
    "strategy_insights",
    "strategy_verdict",
]
