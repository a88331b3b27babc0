"""Plain-language verdicts on backtest statistics."""

from __future__ import annotations
from enum import Enum
from typing import List, Tuple

from market_engine.analytics.metrics import BacktestStats
from market_engine.core.types import ExitReason


class Verdict(str, Enum):
    VIABLE = "viable"
    NEEDS_OPTIMIZATION = "needs_optimization"
    UNDERPERFORMING = "underperforming"


def strategy_verdict(stats: BacktestStats) -> Verdict:
    if stats.win_rate >= 60 and stats.profit_factor >= 1.5:
        return Verdict.VIABLE
    if stats.win_rate >= 50 and stats.profit_factor >= 1.0:
        return Verdict.NEEDS_OPTIMIZATION
    return Verdict.UNDERPERFORMING


def strategy_insights(stats: BacktestStats) -> Tuple[Verdict, List[str]]:
    """Verdict plus warnings about the exit mix."""
    verdict = strategy_verdict(stats)
    notes = {
        Verdict.VIABLE: "Strategy is viable - consider paper trading",
        Verdict.NEEDS_OPTIMIZATION: "Strategy needs optimization - adjust parameters",
        Verdict.UNDERPERFORMING: "Strategy is underperforming - reconsider approach",
    }
    insights = [notes[verdict]]
    if stats.exits(ExitReason.STOP_LOSS) > stats.exits(ExitReason.TP3) * 2:
        insights.append("Too many stop losses - consider wider stops or stricter entries")
    if stats.exits(ExitReason.TIMEOUT) > stats.total_trades * 0.3:
        insights.append("Many time-based exits - strategy may lack momentum")
    return verdict, insights
