"""
Load configuration from config.yaml and .env. Analysis thresholds live in one frozen structure.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from market_engine.core.types import StrategyName


@dataclass(frozen=True)
class TradeLadder:
    """Stop / take-profit offsets (fractions of entry) and minimum signal for one strategy."""
    stop_pct: float
    tp1_pct: float
    tp2_pct: float
    tp3_pct: float
    min_signal: float


@dataclass(frozen=True)
class Thresholds:
    """Every numeric cut-off used by indicators, classifiers, scorers and setup generation."""
    # Indicators
    ema_fast_period: int = 9
    ema_slow_period: int = 21
    rsi_period: int = 14
    bb_period: int = 20
    bb_k: float = 2.0
    volume_avg_window: int = 20
    volume_trend_window: int = 5
    volume_rising_ratio: float = 1.2
    volume_falling_ratio: float = 0.8

    # Market conditions
    trend_band: float = 0.01
    bandwidth_high: float = 0.10
    bandwidth_medium: float = 0.05
    momentum_rsi_bullish: float = 60.0
    momentum_rsi_bearish: float = 40.0
    band_tolerance: float = 0.05

    # Liquidity sweep
    sweep_lookback: int = 10
    sweep_min_extra: int = 5
    sweep_wick_body_ratio: float = 0.5
    sweep_base_confidence: float = 60.0
    sweep_ratio_weight: float = 20.0

    # Chart patterns
    pattern_lookback: int = 20
    structure_min_candles: int = 6
    structure_base_confidence: float = 70.0
    structure_strength_weight: float = 50.0
    structure_confidence_cap: float = 95.0
    double_bottom_min_candles: int = 10
    double_bottom_tolerance: float = 0.02
    double_bottom_min_separation: int = 3
    double_bottom_base_confidence: float = 75.0
    double_bottom_gap_weight: float = 1000.0
    double_bottom_confidence_cap: float = 95.0
    flag_pole_candles: int = 8
    flag_candles: int = 7
    flag_min_pole_gain: float = 0.05
    flag_max_range: float = 0.03
    flag_base_confidence: float = 70.0
    flag_confidence_cap: float = 90.0

    # Regime
    regime_window: int = 20
    strong_trend: float = 0.03
    weak_trend: float = 0.01
    volatility_low_pct: float = 1.0
    volatility_medium_pct: float = 2.5
    regime_strong_weight: float = 1000.0
    regime_strong_cap: float = 95.0
    regime_strong_confidence: float = 70.0
    regime_weak_confidence: float = 70.0
    regime_ranging_confidence: float = 80.0
    regime_default_confidence: int = 50

    # Momentum scoring
    momentum_rsi_low: float = 45.0
    momentum_rsi_high: float = 65.0
    momentum_rsi_weak: float = 40.0
    rsi_overbought: float = 70.0
    momentum_volume_ratio: float = 1.2

    # Mean-reversion scoring
    rsi_oversold: float = 30.0
    reversion_rsi_neutral_low: float = 40.0
    reversion_rsi_neutral_high: float = 60.0
    reversion_strong_downtrend: float = -0.02
    reversion_moderate_downtrend: float = -0.01
    reversion_strong_uptrend: float = 0.02
    reversion_mean_distance: float = 0.02
    reversion_range_strength: float = 0.01

    # Setup generation and execution
    setup_lookback: int = 30
    retrace_factor: float = 0.995
    momentum_ladder: TradeLadder = field(
        default_factory=lambda: TradeLadder(0.03, 0.01, 0.02, 0.035, 75.0)
    )
    mean_reversion_ladder: TradeLadder = field(
        default_factory=lambda: TradeLadder(0.04, 0.015, 0.03, 0.045, 65.0)
    )

    def ladder_for(self, strategy: StrategyName | str) -> TradeLadder:
        if StrategyName(strategy) == StrategyName.MOMENTUM:
            return self.momentum_ladder
        return self.mean_reversion_ladder


DEFAULT_THRESHOLDS = Thresholds()


def thresholds_from_dict(data: Optional[dict[str, Any]], base: Thresholds = DEFAULT_THRESHOLDS) -> Thresholds:
    """Overlay a (possibly partial) mapping onto base thresholds. Unknown keys raise ValueError."""
    if not data:
        return base
    known = {f.name for f in fields(Thresholds)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown threshold keys: {', '.join(unknown)}")
    overrides: dict[str, Any] = {}
    for key, value in data.items():
        current = getattr(base, key)
        if isinstance(current, TradeLadder):
            if not isinstance(value, dict):
                raise ValueError(f"Threshold {key} must be a mapping")
            overrides[key] = replace(current, **{k: float(v) for k, v in value.items()})
        elif isinstance(current, int):
            overrides[key] = int(value)
        else:
            overrides[key] = float(value)
    return replace(base, **overrides)


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_int(key: str, default: int = 0) -> int:
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    def env_float(key: str, default: float = 0.0) -> float:
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    backtest = data.get("backtest", {}) or {}
    logging_cfg = data.get("logging", {}) or {}
    candles_csv = env("CANDLES_CSV", backtest.get("candles_csv") or "")

    return Config(
        strategy=StrategyName(env("STRATEGY", backtest.get("strategy", "momentum")).lower()),
        signal_threshold=env_float("SIGNAL_THRESHOLD", backtest.get("signal_threshold", 70.0)),
        max_hold_candles=env_int("MAX_HOLD_CANDLES", backtest.get("max_hold_candles", 24)),
        warmup_candles=int(backtest.get("warmup_candles", 30)),
        candles_csv=Path(candles_csv) if candles_csv else None,
        simulate_count=int(backtest.get("simulate_count", 500)),
        simulate_seed=env_int("SIMULATE_SEED", backtest.get("simulate_seed", 42)),
        start_price=float(backtest.get("start_price", 100.0)),
        timeframe=env("TIMEFRAME", backtest.get("timeframe", "1h")),
        thresholds=thresholds_from_dict(data.get("thresholds")),
        # Logging
        log_level=env("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_dir=Path(logging_cfg.get("log_dir", "logs")),
        log_file=logging_cfg.get("log_file", "market_engine.log"),
    )


class Config:
    """Unified configuration. Immutable after load."""

    __slots__ = (
        "strategy", "signal_threshold", "max_hold_candles", "warmup_candles",
        "candles_csv", "simulate_count", "simulate_seed", "start_price", "timeframe",
        "thresholds",
        "log_level", "log_dir", "log_file",
    )

    def __init__(
        self,
        strategy: StrategyName = StrategyName.MOMENTUM,
        signal_threshold: float = 70.0,
        max_hold_candles: int = 24,
        warmup_candles: int = 30,
        candles_csv: Optional[Path] = None,
        simulate_count: int = 500,
        simulate_seed: int = 42,
        start_price: float = 100.0,
        timeframe: str = "1h",
        thresholds: Thresholds = DEFAULT_THRESHOLDS,
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "market_engine.log",
    ):
        self.strategy = strategy
        self.signal_threshold = signal_threshold
        self.max_hold_candles = max_hold_candles
        self.warmup_candles = warmup_candles
        self.candles_csv = candles_csv
        self.simulate_count = simulate_count
        self.simulate_seed = simulate_seed
        self.start_price = start_price
        self.timeframe = timeframe
        self.thresholds = thresholds
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file
