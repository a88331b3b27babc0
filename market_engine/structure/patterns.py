"""
Chart pattern detection over a trailing window.

Detectors run in a fixed order and the first hit wins: higher lows, lower highs,
double bottom, bull flag. Scorers weight each kind differently, so the order is
part of the contract.
"""

from __future__ import annotations
from typing import Callable, Optional, Sequence

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.types import Candle, ChartPattern, PatternKind

Detector = Callable[[Sequence[Candle], Thresholds], ChartPattern]


def _none(description: str = "") -> ChartPattern:
    return ChartPattern(detected=False, kind=PatternKind.NONE, confidence=0, description=description)


def _local_lows(candles: Sequence[Candle]) -> list[float]:
    return [
        candles[i].low
        for i in range(1, len(candles) - 1)
        if candles[i].low < candles[i - 1].low and candles[i].low < candles[i + 1].low
    ]


def _local_highs(candles: Sequence[Candle]) -> list[float]:
    return [
        candles[i].high
        for i in range(1, len(candles) - 1)
        if candles[i].high > candles[i - 1].high and candles[i].high > candles[i + 1].high
    ]


def _structure_confidence(strength_pct: float, t: Thresholds) -> int:
    return round(min(t.structure_confidence_cap, t.structure_base_confidence + strength_pct * t.structure_strength_weight))


def check_higher_lows(candles: Sequence[Candle], thresholds: Thresholds = DEFAULT_THRESHOLDS) -> ChartPattern:
    """Last three swing lows strictly rising."""
    if len(candles) < thresholds.structure_min_candles:
        return _none()
    lows = _local_lows(candles)
    if len(lows) < 3:
        return _none()
    low1, low2, low3 = lows[-3:]
    if low1 < low2 < low3:
        strength = (low3 - low1) / low1 * 100
        return ChartPattern(
            detected=True,
            kind=PatternKind.HIGHER_LOW,
            confidence=_structure_confidence(strength, thresholds),
            description=f"Higher lows: {low1:.2f} -> {low2:.2f} -> {low3:.2f}",
        )
    return _none()


def check_lower_highs(candles: Sequence[Candle], thresholds: Thresholds = DEFAULT_THRESHOLDS) -> ChartPattern:
    """Last three swing highs strictly falling."""
    if len(candles) < thresholds.structure_min_candles:
        return _none()
    highs = _local_highs(candles)
    if len(highs) < 3:
        return _none()
    high1, high2, high3 = highs[-3:]
    if high1 > high2 > high3:
        strength = (high1 - high3) / high1 * 100
        return ChartPattern(
            detected=True,
            kind=PatternKind.LOWER_HIGH,
            confidence=_structure_confidence(strength, thresholds),
            description=f"Lower highs: {high1:.2f} -> {high2:.2f} -> {high3:.2f}",
        )
    return _none()


def check_double_bottom(candles: Sequence[Candle], thresholds: Thresholds = DEFAULT_THRESHOLDS) -> ChartPattern:
    """Two swing lows (strict minimum over +/-2 candles) at a similar price."""
    t = thresholds
    if len(candles) < t.double_bottom_min_candles:
        return _none()
    bottoms: list[tuple[int, float]] = []
    for i in range(2, len(candles) - 2):
        low = candles[i].low
        if all(low < candles[j].low for j in (i - 2, i - 1, i + 1, i + 2)):
            bottoms.append((i, low))
    if len(bottoms) < 2:
        return _none()
    (idx1, price1), (idx2, price2) = bottoms[-2:]
    gap = abs(price2 - price1) / price1
    if gap < t.double_bottom_tolerance and idx2 - idx1 >= t.double_bottom_min_separation:
        confidence = min(t.double_bottom_confidence_cap, t.double_bottom_base_confidence - gap * t.double_bottom_gap_weight)
        return ChartPattern(
            detected=True,
            kind=PatternKind.DOUBLE_BOTTOM,
            confidence=round(confidence),
            description=f"Double bottom: {price1:.2f} ~ {price2:.2f}",
        )
    return _none()


def check_bull_flag(candles: Sequence[Candle], thresholds: Thresholds = DEFAULT_THRESHOLDS) -> ChartPattern:
    """Impulsive pole followed by a tight consolidation over the newest candles."""
    t = thresholds
    span = t.flag_pole_candles + t.flag_candles
    if len(candles) < span:
        return _none()
    pole_start = candles[len(candles) - span]
    pole_end_idx = len(candles) - t.flag_candles
    pole_end = candles[pole_end_idx]
    pole_gain = (pole_end.close - pole_start.close) / pole_start.close
    if pole_gain < t.flag_min_pole_gain:
        return _none()
    flag = candles[pole_end_idx:]
    flag_high = max(c.high for c in flag)
    flag_low = min(c.low for c in flag)
    flag_range = (flag_high - flag_low) / flag_low
    if flag_range <= t.flag_max_range:
        return ChartPattern(
            detected=True,
            kind=PatternKind.BULL_FLAG,
            confidence=round(min(t.flag_confidence_cap, t.flag_base_confidence + pole_gain * 100)),
            description=f"Bull flag: {pole_gain * 100:.1f}% pole, {flag_range * 100:.1f}% flag",
        )
    return _none()


PATTERN_DETECTORS: tuple[Detector, ...] = (
    check_higher_lows,
    check_lower_highs,
    check_double_bottom,
    check_bull_flag,
)


def detect_chart_pattern(
    candles: Sequence[Candle],
    lookback: Optional[int] = None,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> ChartPattern:
    """First detected pattern over the last `lookback` candles, in PATTERN_DETECTORS order."""
    lookback = lookback if lookback is not None else thresholds.pattern_lookback
    if len(candles) < lookback:
        return _none("Insufficient data")
    window = candles[-lookback:]
    for detector in PATTERN_DETECTORS:
        pattern = detector(window, thresholds)
        if pattern.detected:
            return pattern
    return _none("No pattern detected")
