"""Abstract strategy: scores a candle window and owns its trade ladder."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds, TradeLadder
from market_engine.core.types import Candle, Indicators, SignalScore, StrategyName
from market_engine.structure.context import StructureContext, build_structure_context

NEUTRAL_SCORE = 50.0


class ScoreSheet:
    """Additive score accumulator; the total is clamped to [0, 100] on read."""

    def __init__(self, strategy: StrategyName, baseline: float = NEUTRAL_SCORE):
        self.strategy = strategy
        self.total = baseline
        self.reasoning: list[str] = []

    def add(self, points: float, reason: str) -> None:
        self.total += points
        self.reasoning.append(f"{points:+.1f} {reason}")

    def result(self) -> SignalScore:
        return SignalScore(
            strategy=self.strategy,
            score=max(0.0, min(100.0, self.total)),
            reasoning=tuple(self.reasoning),
        )


class BaseStrategy(ABC):
    """Strategy turns indicators + structure into a 0-100 score."""

    name: StrategyName

    def __init__(self, thresholds: Thresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    @property
    def ladder(self) -> TradeLadder:
        return self.thresholds.ladder_for(self.name)

    def score(
        self,
        candles: Sequence[Candle],
        indicators: Indicators,
        context: Optional[StructureContext] = None,
    ) -> SignalScore:
        """Score the newest candle. Structure is computed here unless the caller passes it in."""
        if context is None:
            context = build_structure_context(candles, indicators, self.thresholds)
        return self._score(candles, indicators, context)

    @abstractmethod
    def _score(self, candles: Sequence[Candle], indicators: Indicators, context: StructureContext) -> SignalScore:
        pass
