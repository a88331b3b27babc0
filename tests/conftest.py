"""Shared candle factories."""

from datetime import datetime, timedelta

import pytest

from market_engine.core.types import Candle, StrategyName, TradeSetup

T0 = datetime(2024, 1, 1)


def candle(close, high=None, low=None, open_=None, volume=1000.0, i=0):
    """Candle with high/low/open defaulting to close."""
    return Candle(
        timestamp=T0 + timedelta(hours=i),
        open=close if open_ is None else open_,
        high=close if high is None else high,
        low=close if low is None else low,
        close=close,
        volume=volume,
    )


def series(closes, spread=0.0, volume=1000.0):
    """Candles from closes; high/low are close +/- spread."""
    return [candle(c, high=c + spread, low=c - spread, volume=volume, i=i) for i, c in enumerate(closes)]


@pytest.fixture
def bar():
    return candle


@pytest.fixture
def make_series():
    return series


@pytest.fixture
def flat_candles():
    return series([100.0] * 40)


@pytest.fixture
def uptrend_closes():
    # 20 flat closes, then a linear climb to 130 over 10 candles
    return [100.0] * 20 + [100.0 + 3 * i for i in range(1, 11)]


@pytest.fixture
def ladder_setup():
    return TradeSetup(
        timestamp=T0,
        strategy=StrategyName.MOMENTUM,
        entry=100.0,
        stop_loss=97.0,
        take_profit_1=101.0,
        take_profit_2=102.0,
        take_profit_3=103.5,
        signal_strength=80.0,
    )
