"""Backtesting: setup generation, ladder execution, non-overlapping scan, strategy comparison."""

from market_engine.backtesting.setup import generate_trade_setup
from market_engine.backtesting.execution import execute_trade_setup
from market_engine.backtesting.engine import (
    BacktestEngine,
    BacktestResult,
    StrategyComparison,
    compare_strategies,
    comparison_score,
)

__all__ = [
    "generate_trade_setup",
    "execute_trade_setup",
    "BacktestEngine",
    "BacktestResult",
    "StrategyComparison",
    "compare_strategies",
    "comparison_score",
]
