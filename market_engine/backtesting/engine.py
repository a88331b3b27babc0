"""
Backtest engine: scan a candle series for setups, simulate each one forward and
skip past its holding period so trades never overlap.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

import pandas as pd

from market_engine.analytics.metrics import BacktestStats, compute_backtest_stats
from market_engine.backtesting.execution import DEFAULT_MAX_HOLD, execute_trade_setup
from market_engine.backtesting.setup import generate_trade_setup
from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.errors import InsufficientData
from market_engine.core.types import Candle, StrategyName, TradeResult
from market_engine.utils.candles import candles_from_frame

logger = logging.getLogger("market_engine.backtest")

CandleInput = Union[Sequence[Candle], pd.DataFrame]


@dataclass
class BacktestResult:
    """Backtest output: trades and statistics."""
    strategy: StrategyName
    signal_threshold: float
    candles_analyzed: int
    trades: List[TradeResult] = field(default_factory=list)
    stats: Optional[BacktestStats] = None


class BacktestEngine:
    """
    Runs one strategy over a candle series. Setups are generated from the trailing
    window only; each trade sees the next `max_hold` candles. After a trade the scan
    resumes past its holding period, so a setup that would have qualified inside
    that period is skipped.
    """

    def __init__(
        self,
        strategy: Union[StrategyName, str],
        signal_threshold: float = 70.0,
        max_hold: int = DEFAULT_MAX_HOLD,
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        score_modifier: float = 0.0,
        warmup: Optional[int] = None,
    ):
        self.strategy = StrategyName(strategy)
        self.signal_threshold = signal_threshold
        self.max_hold = max_hold
        self.thresholds = thresholds
        self.score_modifier = score_modifier
        # never below setup_lookback
        self.warmup = max(warmup or 0, thresholds.setup_lookback)

    def run(self, candles: CandleInput) -> BacktestResult:
        """Run backtest on candles or an OHLCV DataFrame (columns: time, open, high, low, close, volume)."""
        if isinstance(candles, pd.DataFrame):
            candles = candles_from_frame(candles)
        n = len(candles)
        logger.info(
            "Backtest %s: threshold=%.0f candles=%d",
            self.strategy.value, self.signal_threshold, n,
        )
        if n:
            logger.debug("Period: %s to %s", candles[0].timestamp, candles[-1].timestamp)

        trades: List[TradeResult] = []
        i = self.warmup
        while i < n - self.max_hold:
            try:
                setup = generate_trade_setup(
                    candles, i, self.strategy, self.thresholds, score_modifier=self.score_modifier,
                )
            except InsufficientData as e:
                logger.debug("Skipping index %d: %s", i, e)
                setup = None
            if setup is None or setup.signal_strength < self.signal_threshold:
                i += 1
                continue

            future = candles[i + 1: i + 1 + self.max_hold]
            result = execute_trade_setup(setup, future, self.max_hold, self.thresholds.retrace_factor)
            trades.append(result)
            logger.debug(
                "Trade @ %d: %s %s exit=%.4f pnl=%.2f%% held=%d",
                i, result.outcome.value, result.exit_reason.value,
                result.exit_price, result.pnl_percent, result.duration_candles,
            )
            i += result.duration_candles + 1

        stats = compute_backtest_stats(trades)
        logger.info("Backtest complete: %d trades, win rate %.1f%%", stats.total_trades, stats.win_rate)
        return BacktestResult(
            strategy=self.strategy,
            signal_threshold=self.signal_threshold,
            candles_analyzed=n,
            trades=trades,
            stats=stats,
        )


@dataclass(frozen=True)
class StrategyComparison:
    strategy: StrategyName
    stats: BacktestStats
    score: float


def comparison_score(stats: BacktestStats) -> float:
    """Ranking score: win_rate * 0.4 + profit_factor * 30 + win fraction * 30."""
    return stats.win_rate * 0.4 + stats.profit_factor * 30 + (stats.wins / max(1, stats.total_trades)) * 30


def compare_strategies(
    candles: CandleInput,
    signal_threshold: float = 70.0,
    max_hold: int = DEFAULT_MAX_HOLD,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
    warmup: Optional[int] = None,
) -> List[StrategyComparison]:
    """Backtest every strategy on the same candles; best first (ties keep declaration order)."""
    if isinstance(candles, pd.DataFrame):
        candles = candles_from_frame(candles)
    comparisons = []
    for strategy in StrategyName:
        result = BacktestEngine(strategy, signal_threshold, max_hold, thresholds, warmup=warmup).run(candles)
        comparisons.append(StrategyComparison(strategy, result.stats, comparison_score(result.stats)))
    return sorted(comparisons, key=lambda c: c.score, reverse=True)
