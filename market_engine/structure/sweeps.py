"""
Liquidity sweep detection: the newest candle wicks through the recent low (high)
and closes back inside the range.
"""

from __future__ import annotations
from typing import Optional, Sequence

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.types import Candle, Direction, LiquiditySweep


def _no_sweep(description: str) -> LiquiditySweep:
    return LiquiditySweep(detected=False, direction=Direction.NONE, confidence=0, description=description)


def detect_liquidity_sweep(
    candles: Sequence[Candle],
    lookback: Optional[int] = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> LiquiditySweep:
    """Check the newest candle against the min low / max high of the preceding lookback-1 candles."""
    t = thresholds
    lookback = lookback if lookback is not None else t.sweep_lookback
    if len(candles) < lookback + t.sweep_min_extra or lookback < 2:
        return _no_sweep("Insufficient data")

    window = candles[-lookback:]
    current = window[-1]
    prior = window[:-1]
    lowest_low = min(c.low for c in prior)
    highest_high = max(c.high for c in prior)
    body = current.body

    if current.low < lowest_low and current.close > lowest_low and current.is_green:
        wick = current.close - current.low
        if wick >= body * t.sweep_wick_body_ratio:
            confidence = min(100.0, t.sweep_base_confidence + (wick / body) * t.sweep_ratio_weight)
            return LiquiditySweep(
                detected=True,
                direction=Direction.BULLISH,
                confidence=round(confidence),
                description=f"Bullish sweep: broke {lowest_low:.2f}, closed {current.close:.2f}",
            )

    if current.high > highest_high and current.close < highest_high and current.close < current.open:
        wick = current.high - current.close
        if wick >= body * t.sweep_wick_body_ratio:
            confidence = min(100.0, t.sweep_base_confidence + (wick / body) * t.sweep_ratio_weight)
            return LiquiditySweep(
                detected=True,
                direction=Direction.BEARISH,
                confidence=round(confidence),
                description=f"Bearish sweep: broke {highest_high:.2f}, closed {current.close:.2f}",
            )

    return _no_sweep("No sweep detected")
