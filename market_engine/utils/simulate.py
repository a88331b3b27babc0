"""
Seeded random-walk OHLCV generator for demos and tests when no real candles are at hand.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Optional

import numpy as np

from market_engine.core.types import Candle
from market_engine.utils.timeframes import timeframe_delta


def simulated_candles(
    count: int,
    start_price: float = 100.0,
    volatility: float = 0.04,
    seed: Optional[int] = 42,
    timeframe: str = "1h",
    start: Optional[datetime] = None,
) -> List[Candle]:
    """
    Random walk with occasional drift changes. The same seed always yields the same series.
    volatility: per-candle spread of close-to-close returns (0.02 ~ BTC, 0.04 ~ small caps).
    """
    rng = np.random.default_rng(seed)
    step = timeframe_delta(timeframe)
    start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
    candles: List[Candle] = []
    price = start_price
    drift = 0.0
    for i in range(count):
        if rng.random() < 0.05:
            drift = (rng.random() - 0.5) * 0.002
        change = (rng.random() - 0.5) * volatility + drift
        open_ = price
        close = price * (1 + change)
        high = max(open_, close) * (1 + rng.random() * volatility * 0.5)
        low = min(open_, close) * (1 - rng.random() * volatility * 0.5)
        volume = 1_000_000 + rng.random() * 2_000_000
        candles.append(Candle(timestamp=start + step * i, open=open_, high=high, low=low, close=close, volume=volume))
        price = close
    return candles
