"""
Momentum strategy: buy strength in uptrends, confirmed by sweeps, continuation
patterns, EMA alignment, a healthy RSI and rising volume.
"""

from __future__ import annotations
from typing import Sequence

from market_engine.core.types import (
    Candle,
    Direction,
    Indicators,
    PatternKind,
    Regime,
    SignalScore,
    StrategyName,
    VolumeTrend,
)
from market_engine.strategies.base import BaseStrategy, ScoreSheet
from market_engine.structure.context import StructureContext

REGIME_POINTS = {
    Regime.STRONG_UPTREND: 25.0,
    Regime.WEAK_UPTREND: 15.0,
    Regime.RANGING: -10.0,
    Regime.WEAK_DOWNTREND: -30.0,
    Regime.STRONG_DOWNTREND: -30.0,
}


class MomentumStrategy(BaseStrategy):
    name = StrategyName.MOMENTUM

    def _score(self, candles: Sequence[Candle], indicators: Indicators, context: StructureContext) -> SignalScore:
        t = self.thresholds
        sheet = ScoreSheet(self.name)

        regime = context.regime.regime
        sheet.add(REGIME_POINTS[regime], f"regime {regime.value}")

        sweep = context.sweep
        if sweep.detected and sweep.direction == Direction.BULLISH:
            sheet.add(sweep.confidence * 0.2, f"bullish liquidity sweep ({sweep.confidence}%)")

        pattern = context.pattern
        if pattern.detected:
            if pattern.kind in (PatternKind.HIGHER_LOW, PatternKind.BULL_FLAG):
                sheet.add(pattern.confidence * 0.15, f"{pattern.kind.value} pattern ({pattern.confidence}%)")
            elif pattern.kind == PatternKind.LOWER_HIGH:
                sheet.add(-15.0, "lower highs: bearish structure")

        if indicators.ema_fast > indicators.ema_slow:
            sheet.add(10.0, "fast EMA above slow EMA")
        else:
            sheet.add(-10.0, "fast EMA below slow EMA")

        r = indicators.rsi
        if t.momentum_rsi_low < r < t.momentum_rsi_high:
            sheet.add(10.0, f"RSI {r:.1f} in momentum zone")
        elif r > t.rsi_overbought:
            sheet.add(-10.0, f"RSI {r:.1f} overbought")
        elif r < t.momentum_rsi_weak:
            sheet.add(-5.0, f"RSI {r:.1f} too weak")

        volume = context.volume
        if volume is not None and volume.trend == VolumeTrend.INCREASING and volume.ratio > t.momentum_volume_ratio:
            sheet.add(10.0, f"volume rising ({volume.ratio:.2f}x average)")

        return sheet.result()
