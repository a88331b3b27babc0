"""
Market regime: EMA trend strength bucket x ATR volatility bucket.
"""

from __future__ import annotations
from typing import Sequence

import numpy as np

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.types import Candle, MarketRegime, Regime, Volatility


def mean_true_range(candles: Sequence[Candle]) -> float:
    """Mean true range over consecutive candle pairs (0 for fewer than two candles)."""
    if len(candles) < 2:
        return 0.0
    high = np.array([c.high for c in candles[1:]], dtype=float)
    low = np.array([c.low for c in candles[1:]], dtype=float)
    prev_close = np.array([c.close for c in candles[:-1]], dtype=float)
    tr = np.maximum.reduce([high - low, np.abs(high - prev_close), np.abs(low - prev_close)])
    return float(tr.mean())


def analyze_market_regime(
    candles: Sequence[Candle],
    ema_fast: float,
    ema_slow: float,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> MarketRegime:
    t = thresholds
    if len(candles) < t.regime_window:
        return MarketRegime(regime=Regime.RANGING, volatility=Volatility.MEDIUM, confidence=t.regime_default_confidence)

    window = candles[-t.regime_window:]
    trend_strength = (ema_fast - ema_slow) / ema_slow if ema_slow else 0.0

    avg_close = sum(c.close for c in window) / len(window)
    volatility_pct = mean_true_range(window) / avg_close * 100 if avg_close else 0.0
    if volatility_pct < t.volatility_low_pct:
        volatility = Volatility.LOW
    elif volatility_pct < t.volatility_medium_pct:
        volatility = Volatility.MEDIUM
    else:
        volatility = Volatility.HIGH

    strong_confidence = min(t.regime_strong_cap, t.regime_strong_confidence + abs(trend_strength) * t.regime_strong_weight)
    if trend_strength > t.strong_trend:
        regime, confidence = Regime.STRONG_UPTREND, strong_confidence
    elif trend_strength > t.weak_trend:
        regime, confidence = Regime.WEAK_UPTREND, t.regime_weak_confidence
    elif trend_strength < -t.strong_trend:
        regime, confidence = Regime.STRONG_DOWNTREND, strong_confidence
    elif trend_strength < -t.weak_trend:
        regime, confidence = Regime.WEAK_DOWNTREND, t.regime_weak_confidence
    else:
        regime, confidence = Regime.RANGING, t.regime_ranging_confidence

    return MarketRegime(regime=regime, volatility=volatility, confidence=round(confidence))
