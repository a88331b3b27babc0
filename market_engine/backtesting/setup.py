"""
Trade setup generation: score the window ending at `index` and, if the strategy
qualifies, place a fixed percentage stop / take-profit ladder around the close.
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence

from market_engine.core.config import DEFAULT_THRESHOLDS, Thresholds
from market_engine.core.types import Candle, StrategyName, TradeSetup
from market_engine.strategies.analysis import MarketAnalysis, analyze_market

logger = logging.getLogger("market_engine.backtest.setup")


def _reasoning(strategy: StrategyName, signal: float, analysis: MarketAnalysis, price: float) -> list[str]:
    ind = analysis.indicators
    cond = analysis.conditions
    if strategy == StrategyName.MOMENTUM:
        lines = [
            f"Momentum setup with {signal:.0f}/100 signal",
            f"EMA: {'bullish alignment' if ind.ema_fast > ind.ema_slow else 'testing crossover'}",
            f"RSI: {ind.rsi:.1f} - {'strong momentum' if ind.rsi > 60 else 'building'}",
        ]
    else:
        near_lower = price < ind.bollinger.lower * 1.02
        lines = [
            f"Mean reversion setup with {signal:.0f}/100 signal",
            f"RSI: {ind.rsi:.1f} - {'oversold' if ind.rsi < 30 else 'below mean'}",
            f"BB position: {'near lower band' if near_lower else 'reverting'}",
        ]
    lines.append(f"Trend: {cond.trend.value}, volatility: {cond.volatility.value}")
    return lines


def generate_trade_setup(
    candles: Sequence[Candle],
    index: int,
    strategy: StrategyName | str,
    thresholds: Thresholds = DEFAULT_THRESHOLDS,
    score_modifier: float = 0.0,
) -> Optional[TradeSetup]:
    """
    Build a long setup at candles[index] or return None.
    score_modifier: external adjustment (session timing, on-chain flow, ...) added before
    the threshold test; it never lifts a hard-blocked score.
    Raises InsufficientData only if thresholds demand more history than setup_lookback provides.
    """
    t = thresholds
    strategy = StrategyName(strategy)
    if index < t.setup_lookback or index >= len(candles):
        return None

    window = candles[index - t.setup_lookback: index + 1]
    analysis = analyze_market(window, t)
    score = analysis.score_for(strategy)
    signal = score.score
    reasoning_extra: list[str] = []
    if score_modifier and not score.blocked:
        signal = max(0.0, min(100.0, signal + score_modifier))
        reasoning_extra.append(f"External modifier {score_modifier:+.1f}")

    ladder = t.ladder_for(strategy)
    if signal < ladder.min_signal:
        return None

    entry = candles[index].close
    reasoning = _reasoning(strategy, signal, analysis, entry) + reasoning_extra + list(score.reasoning)
    setup = TradeSetup(
        timestamp=candles[index].timestamp,
        strategy=strategy,
        entry=entry,
        stop_loss=entry * (1 - ladder.stop_pct),
        take_profit_1=entry * (1 + ladder.tp1_pct),
        take_profit_2=entry * (1 + ladder.tp2_pct),
        take_profit_3=entry * (1 + ladder.tp3_pct),
        signal_strength=signal,
        reasoning=tuple(reasoning),
        index=index,
    )
    logger.debug("Setup %s @ %d: entry=%.4f signal=%.1f", strategy.value, index, entry, signal)
    return setup
