"""Structure snapshot shared by the strategy scorers."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.types import Candle, ChartPattern, Indicators, LiquiditySweep, MarketRegime, VolumeMetrics
from market_engine.indicators.technical import volume_metrics_for
from market_engine.structure.patterns import detect_chart_pattern
from market_engine.structure.regime import analyze_market_regime
from market_engine.structure.sweeps import detect_liquidity_sweep


@dataclass(frozen=True)
class StructureContext:
    regime: MarketRegime
    sweep: LiquiditySweep
    pattern: ChartPattern
    volume: Optional[VolumeMetrics] = None


def build_structure_context(
    candles: Sequence[Candle],
    indicators: Indicators,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> StructureContext:
    """Regime, sweep, pattern and (when enough samples exist) volume metrics for a window."""
    t = thresholds
    volume = None
    if len(candles) >= max(t.volume_avg_window, 2 * t.volume_trend_window):
        volume = volume_metrics_for([c.volume for c in candles], t)
    return StructureContext(
        regime=analyze_market_regime(candles, indicators.ema_fast, indicators.ema_slow, t),
        sweep=detect_liquidity_sweep(candles, thresholds=t),
        pattern=detect_chart_pattern(candles, thresholds=t),
        volume=volume,
    )
