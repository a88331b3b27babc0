"""Timeframe string conversions."""

from datetime import timedelta


def timeframe_minutes(tf: str) -> int:
    """Convert exchange-style timeframe (e.g. '5m', '4h', '1d', '1w') to minutes."""
    tf = tf.strip().lower()
    units = {"m": 1, "h": 60, "d": 60 * 24, "w": 60 * 24 * 7}
    if len(tf) < 2 or tf[-1] not in units or not tf[:-1].isdigit():
        raise ValueError(f"Unsupported timeframe: {tf}")
    return int(tf[:-1]) * units[tf[-1]]


def timeframe_delta(tf: str) -> timedelta:
    """Candle spacing for a timeframe string."""
    return timedelta(minutes=timeframe_minutes(tf))
