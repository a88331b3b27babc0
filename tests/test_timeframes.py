"""Unit tests for utils.timeframes."""

from datetime import timedelta

import pytest
from market_engine.utils.timeframes import timeframe_delta, timeframe_minutes


def test_timeframe_minutes():
    assert timeframe_minutes("5m") == 5
    assert timeframe_minutes("1h") == 60
    assert timeframe_minutes("4H") == 240
    assert timeframe_minutes("1d") == 1440
    assert timeframe_minutes("1w") == 10080


def test_timeframe_delta():
    assert timeframe_delta("15m") == timedelta(minutes=15)


@pytest.mark.parametrize("tf", ["1x", "h", "", "m5"])
def test_timeframe_invalid(tf):
    with pytest.raises(ValueError):
        timeframe_minutes(tf)
