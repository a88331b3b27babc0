"""
Backtest statistics over simulated trades: outcome counts, win rate, PnL averages,
profit factor, exit-reason histogram, drawdown of the compounded equity curve.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from market_engine.core.types import ExitReason, Outcome, TradeResult


@dataclass(frozen=True)
class BacktestStats:
    """Aggregate statistics. win_rate and max_drawdown_pct are percentages; avg_loss is a magnitude."""
    total_trades: int
    wins: int
    losses: int
    partials: int
    win_rate: float
    total_pnl: float
    avg_pnl: float
    avg_win: float
    avg_loss: float
    profit_factor: float
    max_drawdown_pct: float
    avg_duration: float
    exit_reasons: dict[ExitReason, int] = field(default_factory=dict)

    def exits(self, reason: ExitReason) -> int:
        return self.exit_reasons.get(reason, 0)

    def to_dict(self) -> dict:
        return {
            "total_trades": self.total_trades,
            "wins": self.wins,
            "losses": self.losses,
            "partials": self.partials,
            "win_rate": round(self.win_rate, 1),
            "total_pnl": round(self.total_pnl, 2),
            "avg_pnl": round(self.avg_pnl, 2),
            "avg_win": round(self.avg_win, 2),
            "avg_loss": round(self.avg_loss, 2),
            "profit_factor": round(self.profit_factor, 2),
            "max_drawdown_pct": round(self.max_drawdown_pct, 2),
            "avg_duration": round(self.avg_duration, 1),
            "exit_reasons": {reason.value: count for reason, count in self.exit_reasons.items()},
        }


def max_drawdown(cumulative_returns: List[float]) -> float:
    """Max drawdown in percent (e.g. -15.0 = 15% below the running peak)."""
    if not cumulative_returns:
        return 0.0
    arr = np.array(cumulative_returns)
    peak = np.maximum.accumulate(arr)
    dd = (arr - peak) / np.where(peak != 0, peak, 1)
    return float(np.min(dd)) * 100.0


def equity_curve(results: Sequence[TradeResult]) -> List[float]:
    """Equity starting at 1.0, compounding each trade's pnl_percent."""
    curve = [1.0]
    for r in results:
        curve.append(curve[-1] * (1 + r.pnl_percent / 100.0))
    return curve


def win_rate(results: Sequence[TradeResult]) -> float:
    """Percentage of trades with outcome win."""
    if not results:
        return 0.0
    return sum(1 for r in results if r.outcome == Outcome.WIN) / len(results) * 100.0


def profit_factor(avg_win: float, wins: int, avg_loss: float, losses: int) -> float:
    """(avg_win * wins) / (avg_loss * losses). Returns 0 if there are no losses."""
    if avg_loss <= 0 or losses == 0:
        return 0.0
    return (avg_win * wins) / (avg_loss * losses)


def compute_backtest_stats(results: Sequence[TradeResult]) -> BacktestStats:
    """Fresh statistics for a list of results; partial outcomes count toward totals only."""
    total = len(results)
    win_pnls = [r.pnl for r in results if r.outcome == Outcome.WIN]
    loss_pnls = [r.pnl for r in results if r.outcome == Outcome.LOSS]
    partials = sum(1 for r in results if r.outcome == Outcome.PARTIAL)
    total_pnl = sum(r.pnl for r in results)

    avg_win = sum(win_pnls) / len(win_pnls) if win_pnls else 0.0
    avg_loss = abs(sum(loss_pnls) / len(loss_pnls)) if loss_pnls else 0.0

    exit_reasons = {reason: 0 for reason in ExitReason}
    for r in results:
        exit_reasons[r.exit_reason] += 1

    return BacktestStats(
        total_trades=total,
        wins=len(win_pnls),
        losses=len(loss_pnls),
        partials=partials,
        win_rate=win_rate(results),
        total_pnl=total_pnl,
        avg_pnl=total_pnl / total if total else 0.0,
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=profit_factor(avg_win, len(win_pnls), avg_loss, len(loss_pnls)),
        max_drawdown_pct=max_drawdown(equity_curve(results)) if results else 0.0,
        avg_duration=sum(r.duration_candles for r in results) / total if total else 0.0,
        exit_reasons=exit_reasons,
    )
