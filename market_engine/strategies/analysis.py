"""
Full analysis of one candle window: indicators, conditions, structure and both strategy scores.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.types import Candle, Indicators, MarketConditions, SignalScore, StrategyName
from market_engine.indicators.technical import all_indicators, market_conditions
from market_engine.strategies.base import BaseStrategy
from market_engine.strategies.mean_reversion import MeanReversionStrategy
from market_engine.strategies.momentum import MomentumStrategy
from market_engine.structure.context import StructureContext, build_structure_context

STRATEGIES: dict[StrategyName, type[BaseStrategy]] = {
    StrategyName.MOMENTUM: MomentumStrategy,
    StrategyName.MEAN_REVERSION: MeanReversionStrategy,
}


def get_strategy(name: StrategyName | str, thresholds: Thresholds = DEFAULT_THRESHOLDS) -> BaseStrategy:
    """Instantiate a strategy by name ('momentum' or 'mean_reversion')."""
    try:
        cls = STRATEGIES[StrategyName(name)]
    except ValueError:
        raise ValueError(f"Unknown strategy: {name}") from None
    return cls(thresholds)


@dataclass(frozen=True)
class MarketAnalysis:
    indicators: Indicators
    conditions: MarketConditions
    structure: StructureContext
    momentum: SignalScore
    mean_reversion: SignalScore

    def score_for(self, strategy: StrategyName | str) -> SignalScore:
        if StrategyName(strategy) == StrategyName.MOMENTUM:
            return self.momentum
        return self.mean_reversion


def analyze_market(candles: Sequence[Candle], thresholds: Thresholds = DEFAULT_THRESHOLDS) -> MarketAnalysis:
    """Analyze the newest candle of `candles`. Raises InsufficientData if indicators cannot be computed."""
    indicators = all_indicators([c.close for c in candles], thresholds)
    structure = build_structure_context(candles, indicators, thresholds)
    return MarketAnalysis(
        indicators=indicators,
        conditions=market_conditions(candles, indicators, thresholds),
        structure=structure,
        momentum=MomentumStrategy(thresholds).score(candles, indicators, structure),
        mean_reversion=MeanReversionStrategy(thresholds).score(candles, indicators, structure),
    )
