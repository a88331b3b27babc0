"""
Technical indicators over a close/volume series: EMA, RSI, Bollinger Bands, volume metrics.
Each function returns the value for the newest sample and raises InsufficientData on short input.
"""

from __future__ import annotations
from typing import Sequence

import numpy as np
import pandas as pd

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.errors import InsufficientData
from market_engine.core.types import (
    BandPosition,
    BollingerBands,
    Candle,
    Direction,
    Indicators,
    MarketConditions,
    Momentum,
    Trend,
    Volatility,
    VolumeMetrics,
    VolumeTrend,
)


def ema(prices: Sequence[float], period: int) -> float:
    """EMA seeded with the first price, k = 2 / (period + 1)."""
    if len(prices) < period:
        raise InsufficientData(f"EMA({period})", period, len(prices))
    series = pd.Series(prices, dtype=float)
    return float(series.ewm(span=period, adjust=False).mean().iloc[-1])


def rsi(prices: Sequence[float], period: int = 14) -> float:
    """RSI from simple averages of the last `period` gains and losses."""
    if len(prices) < period + 1:
        raise InsufficientData(f"RSI({period})", period + 1, len(prices))
    deltas = np.diff(np.asarray(prices, dtype=float))
    gains = np.clip(deltas, 0.0, None)[-period:]
    losses = np.clip(-deltas, 0.0, None)[-period:]
    avg_gain = gains.sum() / period
    avg_loss = losses.sum() / period
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return float(100.0 - 100.0 / (1.0 + rs))


def bollinger_bands(prices: Sequence[float], period: int = 20, k: float = 2.0) -> BollingerBands:
    """SMA +/- k population standard deviations over the trailing `period` prices."""
    if len(prices) < period:
        raise InsufficientData(f"Bollinger({period})", period, len(prices))
    window = np.asarray(prices, dtype=float)[-period:]
    sma = float(window.mean())
    sd = float(window.std())
    return BollingerBands(upper=sma + k * sd, middle=sma, lower=sma - k * sd)


def volume_metrics(
    volumes: Sequence[float],
    average_window: int = 20,
    trend_window: int = 5,
    rising_ratio: float = 1.2,
    falling_ratio: float = 0.8,
) -> VolumeMetrics:
    """Current volume vs. its rolling average, and recent-vs-preceding trend."""
    required = max(average_window, 2 * trend_window)
    if len(volumes) < required:
        raise InsufficientData("volume metrics", required, len(volumes))
    arr = np.asarray(volumes, dtype=float)
    current = float(arr[-1])
    average = float(arr[-average_window:].mean())
    ratio = current / average if average > 0 else 0.0
    recent = float(arr[-trend_window:].mean())
    older = float(arr[-2 * trend_window:-trend_window].mean())
    if recent > older * rising_ratio:
        trend = VolumeTrend.INCREASING
    elif recent < older * falling_ratio:
        trend = VolumeTrend.DECREASING
    else:
        trend = VolumeTrend.STABLE
    return VolumeMetrics(current=current, average=average, ratio=ratio, trend=trend)


def volume_metrics_for(volumes: Sequence[float], thresholds: Thresholds = DEFAULT_THRESHOLDS) -> VolumeMetrics:
    return volume_metrics(
        volumes,
        average_window=thresholds.volume_avg_window,
        trend_window=thresholds.volume_trend_window,
        rising_ratio=thresholds.volume_rising_ratio,
        falling_ratio=thresholds.volume_falling_ratio,
    )


def all_indicators(prices: Sequence[float], thresholds: Thresholds = DEFAULT_THRESHOLDS) -> Indicators:
    """EMA fast/slow, RSI and Bollinger Bands for the newest close."""
    t = thresholds
    required = max(t.ema_fast_period, t.ema_slow_period, t.rsi_period + 1, t.bb_period)
    if len(prices) < required:
        raise InsufficientData("indicator set", required, len(prices))
    return Indicators(
        ema_fast=ema(prices, t.ema_fast_period),
        ema_slow=ema(prices, t.ema_slow_period),
        rsi=rsi(prices, t.rsi_period),
        bollinger=bollinger_bands(prices, t.bb_period, t.bb_k),
    )


def market_conditions(
    candles: Sequence[Candle],
    indicators: Indicators,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
) -> MarketConditions:
    """Categorical trend / volatility / volume / momentum summary."""
    t = thresholds
    if indicators.ema_fast > indicators.ema_slow * (1 + t.trend_band):
        trend = Trend.UP
    elif indicators.ema_fast < indicators.ema_slow * (1 - t.trend_band):
        trend = Trend.DOWN
    else:
        trend = Trend.SIDEWAYS

    bands = indicators.bollinger
    band_width = bands.width / bands.middle if bands.middle else 0.0
    if band_width > t.bandwidth_high:
        volatility = Volatility.HIGH
    elif band_width > t.bandwidth_medium:
        volatility = Volatility.MEDIUM
    else:
        volatility = Volatility.LOW

    volumes = [c.volume for c in candles]
    if len(volumes) >= max(t.volume_avg_window, 2 * t.volume_trend_window):
        volume_trend = volume_metrics_for(volumes, t).trend
    else:
        volume_trend = VolumeTrend.STABLE

    if indicators.rsi > t.momentum_rsi_bullish and trend == Trend.UP:
        momentum = Momentum.BULLISH
    elif indicators.rsi < t.momentum_rsi_bearish and trend == Trend.DOWN:
        momentum = Momentum.BEARISH
    else:
        momentum = Momentum.NEUTRAL

    return MarketConditions(trend=trend, volatility=volatility, volume_trend=volume_trend, momentum=momentum)


def ema_crossover(current_fast: float, current_slow: float, previous_fast: float, previous_slow: float) -> Direction:
    """Golden cross (bullish) / death cross (bearish) between two consecutive EMA pairs."""
    current_above = current_fast > current_slow
    previous_above = previous_fast > previous_slow
    if current_above and not previous_above:
        return Direction.BULLISH
    if previous_above and not current_above:
        return Direction.BEARISH
    return Direction.NONE


def bollinger_position(price: float, bands: BollingerBands, tolerance: float = 0.05) -> BandPosition:
    """Where price sits relative to the bands; `tolerance` is a fraction of band width."""
    tol = bands.width * tolerance
    if bands.upper - tol <= price <= bands.upper + tol:
        return BandPosition.AT_UPPER
    if bands.lower - tol <= price <= bands.lower + tol:
        return BandPosition.AT_LOWER
    if price > bands.upper:
        return BandPosition.ABOVE_UPPER
    if price < bands.lower:
        return BandPosition.BELOW_LOWER
    return BandPosition.MIDDLE
