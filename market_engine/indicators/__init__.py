"""Indicators: EMA, RSI, Bollinger Bands, volume metrics, market conditions."""

from market_engine.indicators.technical import (
    ema,
    rsi,
    bollinger_bands,
    volume_metrics,
    volume_metrics_for,
    all_indicators,
    market_conditions,
    ema_crossover,
    bollinger_position,
)

__all__ = [
    "ema",
    "rsi",
    "bollinger_bands",
    "volume_metrics",
    "volume_metrics_for",
    "all_indicators",
    "market_conditions",
    "ema_crossover",
    "bollinger_position",
]
