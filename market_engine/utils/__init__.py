"""Utils: candle/DataFrame adapters, CSV loading, simulated candles, timeframes."""

from market_engine.utils.candles import candles_from_frame, candles_to_frame, load_candles_csv
from market_engine.utils.simulate import simulated_candles
from market_engine.utils.timeframes import timeframe_delta, timeframe_minutes

__all__ = [
    "candles_from_frame",
    "candles_to_frame",
    "load_candles_csv",
    "simulated_candles",
    "timeframe_delta",
    "timeframe_minutes",
]
