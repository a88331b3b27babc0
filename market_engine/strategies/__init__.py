"""Strategies: base scorer, momentum, mean reversion, full-window analysis."""

from market_engine.strategies.base import BaseStrategy, ScoreSheet
from market_engine.strategies.momentum import MomentumStrategy
from market_engine.strategies.mean_reversion import MeanReversionStrategy
from market_engine.strategies.analysis import STRATEGIES, MarketAnalysis, analyze_market, get_strategy

__all__ = [
    "BaseStrategy",
    "ScoreSheet",
    "MomentumStrategy",
    "MeanReversionStrategy",
    "STRATEGIES",
    "MarketAnalysis",
    "analyze_market",
    "get_strategy",
]
