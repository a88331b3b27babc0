"""
Conversions between Candle lists and OHLCV DataFrames, and CSV loading.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Sequence, Union

import pandas as pd

from market_engine.core.types import Candle

OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")


def candles_from_frame(df: pd.DataFrame) -> List[Candle]:
    """
    DataFrame (columns: time or timestamp, open, high, low, close, volume) to candles.
    Row order is kept; volume defaults to 0 when the column is missing.
    """
    frame = df.rename(columns=str.lower)
    time_col = "timestamp" if "timestamp" in frame.columns else "time"
    missing = [c for c in ("open", "high", "low", "close") if c not in frame.columns]
    if time_col not in frame.columns:
        missing.insert(0, "time")
    if missing:
        raise ValueError(f"OHLCV frame is missing columns: {', '.join(missing)}")
    volumes = frame["volume"] if "volume" in frame.columns else pd.Series(0.0, index=frame.index)
    return [
        Candle(
            timestamp=ts.to_pydatetime() if isinstance(ts, pd.Timestamp) else ts,
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
        )
        for ts, o, h, lo, c, v in zip(
            frame[time_col], frame["open"], frame["high"], frame["low"], frame["close"], volumes
        )
    ]


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """Candles to an OHLCV DataFrame with a ``time`` column."""
    return pd.DataFrame(
        {
            "time": [c.timestamp for c in candles],
            "open": [c.open for c in candles],
            "high": [c.high for c in candles],
            "low": [c.low for c in candles],
            "close": [c.close for c in candles],
            "volume": [c.volume for c in candles],
        }
    )


def load_candles_csv(path: Union[str, Path]) -> List[Candle]:
    """Load an OHLCV CSV, parse the time column and sort by it."""
    df = pd.read_csv(path)
    df = df.rename(columns=str.lower)
    time_col = "timestamp" if "timestamp" in df.columns else "time"
    if time_col in df.columns:
        col = df[time_col]
        if pd.api.types.is_numeric_dtype(col):
            # Exchange klines: epoch milliseconds
            df[time_col] = pd.to_datetime(col, unit="ms", utc=True)
        else:
            df[time_col] = pd.to_datetime(col, utc=True)
        df = df.sort_values(time_col, kind="stable").reset_index(drop=True)
    return candles_from_frame(df)
