"""
Mean-reversion strategy: buy stretched dips in ranging or weakly trending markets.
Strong trends block the strategy outright (score 0) instead of merely penalising it.
"""

from __future__ import annotations
from typing import Sequence

from market_engine.core.types import (
    BandPosition,
    Candle,
    Direction,
    Indicators,
    PatternKind,
    Regime,
    SignalScore,
    StrategyName,
)
from market_engine.indicators.technical import bollinger_position
from market_engine.strategies.base import BaseStrategy, ScoreSheet
from market_engine.structure.context import StructureContext

BLOCKING_REGIMES = (Regime.STRONG_UPTREND, Regime.STRONG_DOWNTREND)


class MeanReversionStrategy(BaseStrategy):
    name = StrategyName.MEAN_REVERSION

    def _score(self, candles: Sequence[Candle], indicators: Indicators, context: StructureContext) -> SignalScore:
        t = self.thresholds
        regime = context.regime.regime
        if regime in BLOCKING_REGIMES:
            return SignalScore(
                strategy=self.name,
                score=0.0,
                blocked=True,
                reasoning=(f"blocked: {regime.value} regime, trend continuation dominates",),
            )

        sheet = ScoreSheet(self.name)
        if regime == Regime.RANGING:
            sheet.add(20.0, "ranging regime")
        else:
            sheet.add(5.0, f"regime {regime.value}")

        sweep = context.sweep
        if sweep.detected and sweep.direction == Direction.BULLISH:
            sheet.add(sweep.confidence * 0.25, f"bullish liquidity sweep ({sweep.confidence}%)")

        pattern = context.pattern
        if pattern.detected:
            if pattern.kind == PatternKind.DOUBLE_BOTTOM:
                sheet.add(pattern.confidence * 0.2, f"double bottom ({pattern.confidence}%)")
            elif pattern.kind == PatternKind.HIGHER_LOW:
                sheet.add(pattern.confidence * 0.1, f"higher lows ({pattern.confidence}%)")

        strength = indicators.trend_strength
        if strength < t.reversion_strong_downtrend:
            sheet.add(-30.0, f"counter-trend: EMA spread {strength:.2%}")
        elif strength < t.reversion_moderate_downtrend:
            sheet.add(-15.0, f"moderate downtrend: EMA spread {strength:.2%}")
        elif strength > t.reversion_strong_uptrend:
            sheet.add(-10.0, f"pullback in uptrend: EMA spread {strength:.2%}")

        price = candles[-1].close
        position = bollinger_position(price, indicators.bollinger, t.band_tolerance)
        if position in (BandPosition.AT_LOWER, BandPosition.BELOW_LOWER):
            sheet.add(15.0, f"price {position.value} band")
        elif position in (BandPosition.AT_UPPER, BandPosition.ABOVE_UPPER):
            sheet.add(-15.0, f"price {position.value} band")

        r = indicators.rsi
        if r < t.rsi_oversold:
            if strength > t.reversion_strong_downtrend:
                sheet.add(15.0, f"RSI {r:.1f} oversold")
        elif r > t.rsi_overbought:
            sheet.add(-15.0, f"RSI {r:.1f} overbought")
        elif t.reversion_rsi_neutral_low < r < t.reversion_rsi_neutral_high:
            sheet.add(5.0, f"RSI {r:.1f} neutral")

        middle = indicators.bollinger.middle
        distance = abs(price - middle) / middle if middle else 0.0
        if distance > t.reversion_mean_distance and abs(strength) < t.reversion_range_strength:
            sheet.add(10.0, f"price {distance:.2%} from mean in a range")

        if len(candles) >= 3 and candles[-3].low < candles[-2].low < candles[-1].low:
            sheet.add(10.0, "higher lows forming")

        return sheet.result()
