"""Core: config, types, errors, logging."""

from market_engine.core.config import (
    load_config,
    Config,
    Thresholds,
    TradeLadder,
    DEFAULT_THRESHOLDS,
    thresholds_from_dict,
)
from market_engine.core.errors import InsufficientData
from market_engine.core.logger import setup_logging
from market_engine.core.types import (
    BandPosition,
    BollingerBands,
    Candle,
    ChartPattern,
    Direction,
    ExitReason,
    Indicators,
    LiquiditySweep,
    MarketConditions,
    MarketRegime,
    Momentum,
    Outcome,
    PatternKind,
    Regime,
    SignalScore,
    StrategyName,
    TradeResult,
    TradeSetup,
    Trend,
    Volatility,
    VolumeMetrics,
    VolumeTrend,
)

__all__ = [
    "load_config",
    "Config",
    "Thresholds",
    "TradeLadder",
    "DEFAULT_THRESHOLDS",
    "thresholds_from_dict",
    "InsufficientData",
    "setup_logging",
    "BandPosition",
    "BollingerBands",
    "Candle",
    "ChartPattern",
    "Direction",
    "ExitReason",
    "Indicators",
    "LiquiditySweep",
    "MarketConditions",
    "MarketRegime",
    "Momentum",
    "Outcome",
    "PatternKind",
    "Regime",
    "SignalScore",
    "StrategyName",
    "TradeResult",
    "TradeSetup",
    "Trend",
    "Volatility",
    "VolumeMetrics",
    "VolumeTrend",
]
