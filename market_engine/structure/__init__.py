"""Structure: liquidity sweeps, chart patterns, market regime."""

from market_engine.structure.sweeps import detect_liquidity_sweep
from market_engine.structure.patterns import PATTERN_DETECTORS, detect_chart_pattern
from market_engine.structure.regime import analyze_market_regime, mean_true_range
from market_engine.structure.context import StructureContext, build_structure_context

__all__ = [
    "detect_liquidity_sweep",
    "PATTERN_DETECTORS",
    "detect_chart_pattern",
    "analyze_market_regime",
    "mean_true_range",
    "StructureContext",
    "build_structure_context",
]
