"""
Core data types: candles, indicators, structure classifications, setups and results.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class StrategyName(str, Enum):
    MOMENTUM = "momentum"
    MEAN_REVERSION = "mean_reversion"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    SIDEWAYS = "sideways"


class Volatility(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class VolumeTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class Momentum(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class Direction(str, Enum):
    """Direction of a single-candle event (sweep, EMA crossover)."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NONE = "none"


class PatternKind(str, Enum):
    HIGHER_LOW = "higher_low"
    LOWER_HIGH = "lower_high"
    DOUBLE_BOTTOM = "double_bottom"
    BULL_FLAG = "bull_flag"
    NONE = "none"


class Regime(str, Enum):
    STRONG_UPTREND = "strong_uptrend"
    WEAK_UPTREND = "weak_uptrend"
    RANGING = "ranging"
    WEAK_DOWNTREND = "weak_downtrend"
    STRONG_DOWNTREND = "strong_downtrend"


class BandPosition(str, Enum):
    AT_UPPER = "at_upper"
    AT_LOWER = "at_lower"
    ABOVE_UPPER = "above_upper"
    BELOW_LOWER = "below_lower"
    MIDDLE = "middle"


class Outcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    PARTIAL = "partial"


class ExitReason(str, Enum):
    TP1 = "TP1"
    TP2 = "TP2"
    TP3 = "TP3"
    STOP_LOSS = "STOP_LOSS"
    TIMEOUT = "TIMEOUT"


@dataclass(frozen=True)
class Candle:
    """OHLCV candle."""
    timestamp: Any
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def is_green(self) -> bool:
        return self.close > self.open


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


@dataclass(frozen=True)
class Indicators:
    """Indicator snapshot for the newest close of a window."""
    ema_fast: float
    ema_slow: float
    rsi: float
    bollinger: BollingerBands

    @property
    def trend_strength(self) -> float:
        """Relative distance of the fast EMA from the slow EMA."""
        if self.ema_slow == 0:
            return 0.0
        return (self.ema_fast - self.ema_slow) / self.ema_slow


@dataclass(frozen=True)
class VolumeMetrics:
    current: float
    average: float
    ratio: float
    trend: VolumeTrend


@dataclass(frozen=True)
class MarketConditions:
    """Coarse categorical summary of a window."""
    trend: Trend
    volatility: Volatility
    volume_trend: VolumeTrend
    momentum: Momentum


@dataclass(frozen=True)
class LiquiditySweep:
    detected: bool
    direction: Direction
    confidence: int
    description: str = ""


@dataclass(frozen=True)
class ChartPattern:
    detected: bool
    kind: PatternKind
    confidence: int
    description: str = ""


@dataclass(frozen=True)
class MarketRegime:
    regime: Regime
    volatility: Volatility
    confidence: int


@dataclass(frozen=True)
class SignalScore:
    """Strategy score (0-100) with the adjustments that produced it."""
    strategy: StrategyName
    score: float
    reasoning: tuple[str, ...] = ()
    blocked: bool = False


@dataclass(frozen=True)
class TradeSetup:
    """Long entry with stop and three take-profit levels."""
    timestamp: Any
    strategy: StrategyName
    entry: float
    stop_loss: float
    take_profit_1: float
    take_profit_2: float
    take_profit_3: float
    signal_strength: float
    reasoning: tuple[str, ...] = ()
    index: int = 0


@dataclass(frozen=True)
class TradeResult:
    """Simulated outcome of a TradeSetup."""
    setup: TradeSetup
    outcome: Outcome
    exit_price: float
    exit_reason: ExitReason
    pnl: float
    pnl_percent: float
    duration_candles: int

    @property
    def entry_index(self) -> int:
        return self.setup.index
