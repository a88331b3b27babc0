"""Sweeps, chart patterns and regime classification."""

import pytest

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.types import Direction, PatternKind, Regime, Volatility
from market_engine.indicators.technical import all_indicators
from market_engine.structure.context import build_structure_context
from market_engine.structure.patterns import (
    PATTERN_DETECTORS,
    check_bull_flag,
    check_double_bottom,
    check_higher_lows,
    check_lower_highs,
    detect_chart_pattern,
)
from market_engine.structure.regime import analyze_market_regime, mean_true_range
from market_engine.structure.sweeps import detect_liquidity_sweep


def _range_candles(bar, n=14):
    return [bar(100.0, high=101.0, low=99.0, open_=100.0, i=i) for i in range(n)]


def test_sweep_flat_series_none(flat_candles):
    sweep = detect_liquidity_sweep(flat_candles)
    assert not sweep.detected
    assert sweep.direction == Direction.NONE
    assert sweep.confidence == 0


def test_sweep_insufficient_data(bar):
    sweep = detect_liquidity_sweep(_range_candles(bar, 14))
    assert not sweep.detected
    assert sweep.description == "Insufficient data"


def test_bullish_sweep(bar):
    # low breaks 99, closes back above; wick 3 / body 2 -> 60 + 1.5 * 20
    candles = _range_candles(bar) + [bar(100.5, high=100.6, low=97.5, open_=98.5, i=14)]
    sweep = detect_liquidity_sweep(candles)
    assert sweep.detected
    assert sweep.direction == Direction.BULLISH
    assert sweep.confidence == 90


def test_bearish_sweep(bar):
    candles = _range_candles(bar) + [bar(99.5, high=102.5, low=99.4, open_=101.5, i=14)]
    sweep = detect_liquidity_sweep(candles)
    assert sweep.detected
    assert sweep.direction == Direction.BEARISH
    assert sweep.confidence == 90


def test_sweep_confidence_capped(bar):
    candles = _range_candles(bar) + [bar(100.0, high=100.2, low=97.0, open_=99.5, i=14)]
    assert detect_liquidity_sweep(candles).confidence == 100


def test_red_candle_below_range_is_not_bullish_sweep(bar):
    candles = _range_candles(bar) + [bar(99.5, high=100.5, low=97.0, open_=100.0, i=14)]
    assert not detect_liquidity_sweep(candles).detected


def _zigzag_lows(bar, n=20):
    # odd candles dip 1 below a rising base
    candles = []
    for i in range(n):
        low = 100 + 0.5 * i - (1 if i % 2 else 0)
        candles.append(bar(low + 1, high=low + 2, low=low, i=i))
    return candles


def _zigzag_highs(bar, n=20):
    # odd candles poke 1 above a falling base
    candles = []
    for i in range(n):
        high = 120 - 0.5 * i + (1 if i % 2 else 0)
        candles.append(bar(high - 1, high=high, low=high - 2, i=i))
    return candles


def test_pattern_flat_series_none(flat_candles):
    pattern = detect_chart_pattern(flat_candles)
    assert not pattern.detected
    assert pattern.kind == PatternKind.NONE


def test_pattern_insufficient_data(make_series):
    pattern = detect_chart_pattern(make_series([100.0] * 19))
    assert not pattern.detected
    assert pattern.description == "Insufficient data"


def test_higher_lows(bar):
    pattern = detect_chart_pattern(_zigzag_lows(bar))
    assert pattern.kind == PatternKind.HIGHER_LOW
    # (107.5 - 105.5) / 105.5 = 1.9% -> 70 + 94.8, capped at 95
    assert pattern.confidence == 95


def test_lower_highs(bar):
    pattern = detect_chart_pattern(_zigzag_highs(bar))
    assert pattern.kind == PatternKind.LOWER_HIGH
    assert pattern.confidence == 95


def test_higher_lows_confidence_below_cap(bar):
    t = Thresholds(structure_strength_weight=5.0)
    pattern = check_higher_lows(_zigzag_lows(bar), t)
    # 70 + 1.8957 * 5 = 79.48
    assert pattern.confidence == 79


def test_double_bottom(bar):
    lows = {6: 95.0, 13: 95.5}
    candles = [bar(101.0, high=102.0, low=lows.get(i, 100.0), i=i) for i in range(20)]
    pattern = detect_chart_pattern(candles)
    assert pattern.kind == PatternKind.DOUBLE_BOTTOM
    # gap 0.5 / 95 = 0.526% -> 75 - 5.26
    assert pattern.confidence == 70


def test_double_bottom_too_far_apart_in_price(bar):
    lows = {6: 95.0, 13: 98.0}
    candles = [bar(101.0, high=102.0, low=lows.get(i, 100.0), i=i) for i in range(20)]
    assert not check_double_bottom(candles).detected


def test_bull_flag(make_series):
    closes = [100.0] * 6 + [100 + (i - 5) * 1.25 for i in range(6, 13)] + [110.0] * 7
    candles = make_series(closes, spread=0.5)
    pattern = detect_chart_pattern(candles)
    assert pattern.kind == PatternKind.BULL_FLAG
    # 70 + 10% pole gain
    assert pattern.confidence == 80


def test_bull_flag_needs_tight_consolidation(make_series):
    closes = [100.0] * 6 + [100 + (i - 5) * 1.25 for i in range(6, 13)] + [110.0, 114.0] * 3 + [110.0]
    assert not check_bull_flag(make_series(closes, spread=0.5)).detected


def test_detector_order():
    assert PATTERN_DETECTORS == (check_higher_lows, check_lower_highs, check_double_bottom, check_bull_flag)


def test_first_detected_pattern_wins(bar):
    # wide odd candles: rising swing lows and falling swing highs at once
    candles = []
    for i in range(20):
        if i % 2:
            candles.append(bar(100.0, high=110 - 0.2 * i, low=90 + 0.2 * i, i=i))
        else:
            candles.append(bar(100.0, high=105.0, low=95.0, i=i))
    assert check_lower_highs(candles).detected
    assert detect_chart_pattern(candles).kind == PatternKind.HIGHER_LOW


def test_regime_short_input_defaults(make_series):
    regime = analyze_market_regime(make_series([100.0] * 19), 110.0, 100.0)
    assert regime.regime == Regime.RANGING
    assert regime.volatility == Volatility.MEDIUM
    assert regime.confidence == 50


def test_regime_uptrend_scenario(uptrend_closes, make_series):
    candles = make_series(uptrend_closes)
    ind = all_indicators(uptrend_closes)
    assert ind.ema_fast > ind.ema_slow
    regime = analyze_market_regime(candles, ind.ema_fast, ind.ema_slow)
    assert regime.regime in (Regime.STRONG_UPTREND, Regime.WEAK_UPTREND)


@pytest.mark.parametrize(
    "ema_fast,expected,confidence",
    [
        (104.0, Regime.STRONG_UPTREND, 95),
        (103.0, Regime.WEAK_UPTREND, 70),
        (102.0, Regime.WEAK_UPTREND, 70),
        (100.5, Regime.RANGING, 80),
        (98.0, Regime.WEAK_DOWNTREND, 70),
        (96.0, Regime.STRONG_DOWNTREND, 95),
    ],
)
def test_regime_trend_buckets(make_series, ema_fast, expected, confidence):
    regime = analyze_market_regime(make_series([100.0] * 20), ema_fast, 100.0)
    assert regime.regime == expected
    assert regime.confidence == confidence


def test_regime_strong_confidence_below_cap(make_series):
    regime = analyze_market_regime(make_series([100.0] * 20), 103.2, 100.0)
    # 70 + 0.032 * 1000, capped at 95
    assert regime.regime == Regime.STRONG_UPTREND
    assert regime.confidence == 95
    t = Thresholds(regime_strong_weight=500.0)
    assert analyze_market_regime(make_series([100.0] * 20), 103.2, 100.0, t).confidence == 86


def test_regime_respects_custom_trend_threshold(make_series):
    t = Thresholds(strong_trend=0.05)
    regime = analyze_market_regime(make_series([100.0] * 20), 104.0, 100.0, t)
    assert regime.regime == Regime.WEAK_UPTREND


@pytest.mark.parametrize(
    "spread,expected",
    [(0.0, Volatility.LOW), (0.75, Volatility.MEDIUM), (3.0, Volatility.HIGH)],
)
def test_regime_volatility_buckets(make_series, spread, expected):
    candles = make_series([100.0] * 20, spread=spread)
    assert analyze_market_regime(candles, 100.0, 100.0).volatility == expected


def test_mean_true_range(bar):
    candles = [bar(100.0, high=101.0, low=99.0), bar(103.0, high=104.0, low=102.5)]
    # max(1.5, |104 - 100|, |102.5 - 100|)
    assert mean_true_range(candles) == pytest.approx(4.0)
    assert mean_true_range(candles[:1]) == 0.0


def test_structure_context_volume_needs_history(make_series):
    closes = [100.0] * 21
    ind = all_indicators(closes)
    ctx = build_structure_context(make_series(closes), ind, DEFAULT_THRESHOLDS)
    assert ctx.volume is not None
    assert ctx.volume.ratio == pytest.approx(1.0)
    short = build_structure_context(make_series(closes[:14]), ind)
    assert short.volume is None
    assert short.sweep.description == "Insufficient data"
