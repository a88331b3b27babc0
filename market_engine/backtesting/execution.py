"""
Forward simulation of a TradeSetup through a take-profit ladder.

Per candle: stop (checked on the low) always wins over take-profits on the same
candle; TP1/TP2 hits only arm the ladder; TP3 exits in full; a close that retraces
below an armed level exits at that level. Unresolved trades time out at the last close.
"""

from __future__ import annotations
from typing import Sequence

from market_engine.core.types import Candle, ExitReason, Outcome, TradeResult, TradeSetup

DEFAULT_MAX_HOLD = 24
RETRACE_FACTOR = 0.995


def execute_trade_setup(
    setup: TradeSetup,
    future_candles: Sequence[Candle],
    max_hold: int = DEFAULT_MAX_HOLD,
    retrace_factor: float = RETRACE_FACTOR,
) -> TradeResult:
    """Walk at most `max_hold` candles after entry. An empty window times out at entry."""
    window = future_candles[:max(0, max_hold)]
    tp1_hit = False
    tp2_hit = False
    duration = 0

    for i, candle in enumerate(window):
        duration = i + 1

        if candle.low <= setup.stop_loss:
            outcome = Outcome.PARTIAL if (tp1_hit or tp2_hit) else Outcome.LOSS
            return _result(setup, outcome, setup.stop_loss, ExitReason.STOP_LOSS, duration)

        if not tp1_hit and candle.high >= setup.take_profit_1:
            tp1_hit = True
        if not tp2_hit and candle.high >= setup.take_profit_2:
            tp2_hit = True

        if candle.high >= setup.take_profit_3:
            return _result(setup, Outcome.WIN, setup.take_profit_3, ExitReason.TP3, duration)
        if tp2_hit and candle.close < setup.take_profit_2 * retrace_factor:
            return _result(setup, Outcome.WIN, setup.take_profit_2, ExitReason.TP2, duration)
        if tp1_hit and not tp2_hit and candle.close < setup.take_profit_1 * retrace_factor:
            return _result(setup, Outcome.PARTIAL, setup.take_profit_1, ExitReason.TP1, duration)

    if not window:
        return _result(setup, Outcome.LOSS, setup.entry, ExitReason.TIMEOUT, 0)

    exit_price = window[-1].close
    if tp1_hit or tp2_hit:
        outcome = Outcome.PARTIAL
    elif exit_price > setup.entry:
        outcome = Outcome.WIN
    else:
        outcome = Outcome.LOSS
    return _result(setup, outcome, exit_price, ExitReason.TIMEOUT, duration)


def _result(setup: TradeSetup, outcome: Outcome, exit_price: float, reason: ExitReason, duration: int) -> TradeResult:
    pnl = exit_price - setup.entry
    pnl_percent = pnl / setup.entry * 100 if setup.entry else 0.0
    return TradeResult(
        setup=setup,
        outcome=outcome,
        exit_price=exit_price,
        exit_reason=reason,
        pnl=pnl,
        pnl_percent=pnl_percent,
        duration_candles=duration,
    )
