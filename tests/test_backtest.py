"""Setup generation, the backtest scan loop and strategy comparison."""

from dataclasses import replace

import pytest

from market_engine.analytics.metrics import BacktestStats
from market_engine.backtesting.engine import BacktestEngine, compare_strategies, comparison_score
from market_engine.backtesting.setup import generate_trade_setup
from market_engine.core.config import DEFAULT_THRESHOLDS, TradeLadder
from market_engine.core.types import ExitReason, Outcome, StrategyName
from market_engine.utils.candles import candles_to_frame
from market_engine.utils.simulate import simulated_candles

ALWAYS_TRADE = replace(
    DEFAULT_THRESHOLDS,
    momentum_ladder=TradeLadder(stop_pct=0.03, tp1_pct=0.01, tp2_pct=0.02, tp3_pct=0.035, min_signal=0.0),
)


@pytest.fixture
def breakout_candles(make_series):
    # 21 flat closes then a climb to 130; the newest candle is index 30
    return make_series([100.0] * 21 + [100.0 + 3 * i for i in range(1, 11)])


def test_setup_requires_warmup(flat_candles):
    assert generate_trade_setup(flat_candles, 29, "momentum", ALWAYS_TRADE) is None
    assert generate_trade_setup(flat_candles, len(flat_candles), "momentum", ALWAYS_TRADE) is None
    assert generate_trade_setup(flat_candles, 30, "momentum", ALWAYS_TRADE) is not None


def test_momentum_setup_ladder(breakout_candles):
    setup = generate_trade_setup(breakout_candles, 30, StrategyName.MOMENTUM)
    assert setup is not None
    assert setup.index == 30
    assert setup.timestamp == breakout_candles[30].timestamp
    assert setup.signal_strength == pytest.approx(75.0)
    assert setup.entry == 130.0
    assert setup.stop_loss == pytest.approx(126.1)
    assert setup.take_profit_1 == pytest.approx(131.3)
    assert setup.take_profit_2 == pytest.approx(132.6)
    assert setup.take_profit_3 == pytest.approx(134.55)
    assert setup.reasoning[0] == "Momentum setup with 75/100 signal"


def test_setup_below_min_signal(breakout_candles, flat_candles):
    # mean reversion is blocked in the strong uptrend
    assert generate_trade_setup(breakout_candles, 30, StrategyName.MEAN_REVERSION) is None
    assert generate_trade_setup(flat_candles, 35, StrategyName.MOMENTUM) is None


def test_score_modifier(breakout_candles):
    assert generate_trade_setup(breakout_candles, 30, "momentum", score_modifier=-5) is None
    boosted = generate_trade_setup(breakout_candles, 30, "momentum", score_modifier=10)
    assert boosted.signal_strength == pytest.approx(85.0)
    assert "External modifier +10.0" in boosted.reasoning
    assert generate_trade_setup(breakout_candles, 30, "mean_reversion", score_modifier=100) is None


def test_engine_flat_series_times_out(make_series):
    candles = make_series([100.0] * 80)
    result = BacktestEngine("momentum", signal_threshold=0, thresholds=ALWAYS_TRADE).run(candles)
    assert [t.entry_index for t in result.trades] == [30, 55]
    assert all(t.exit_reason == ExitReason.TIMEOUT for t in result.trades)
    assert all(t.outcome == Outcome.LOSS for t in result.trades)
    assert all(t.duration_candles == 24 for t in result.trades)
    assert result.stats.total_trades == 2
    assert result.stats.losses == 2
    assert result.stats.profit_factor == 0.0
    assert result.candles_analyzed == 80


def test_engine_accepts_dataframe(make_series):
    candles = make_series([100.0] * 80)
    engine = BacktestEngine("momentum", signal_threshold=0, thresholds=ALWAYS_TRADE)
    from_frame = engine.run(candles_to_frame(candles))
    assert [t.entry_index for t in from_frame.trades] == [30, 55]


def test_engine_threshold_above_100_never_trades():
    result = BacktestEngine("momentum", signal_threshold=101).run(simulated_candles(200, seed=1))
    assert result.trades == []
    assert result.stats.total_trades == 0
    assert result.stats.win_rate == 0.0


def test_engine_short_series():
    result = BacktestEngine("momentum").run(simulated_candles(50, seed=1))
    assert result.trades == []


def test_engine_skips_insufficient_history(make_series):
    t = replace(ALWAYS_TRADE, ema_slow_period=40)
    result = BacktestEngine("momentum", signal_threshold=0, thresholds=t).run(make_series([100.0] * 80))
    assert result.trades == []


@pytest.mark.parametrize("seed", [1, 2, 3])
@pytest.mark.parametrize("strategy", list(StrategyName))
def test_trades_never_overlap(seed, strategy):
    t = replace(
        DEFAULT_THRESHOLDS,
        momentum_ladder=replace(DEFAULT_THRESHOLDS.momentum_ladder, min_signal=40.0),
        mean_reversion_ladder=replace(DEFAULT_THRESHOLDS.mean_reversion_ladder, min_signal=40.0),
    )
    result = BacktestEngine(strategy, signal_threshold=40, thresholds=t).run(simulated_candles(400, seed=seed))
    for prev, nxt in zip(result.trades, result.trades[1:]):
        assert nxt.entry_index >= prev.entry_index + prev.duration_candles
    for trade in result.trades:
        assert 1 <= trade.duration_candles <= 24
        assert trade.setup.signal_strength >= 40
    assert result.stats.total_trades == len(result.trades)


def test_comparison_score():
    stats = BacktestStats(
        total_trades=10, wins=6, losses=4, partials=0, win_rate=60.0, total_pnl=5.0, avg_pnl=0.5,
        avg_win=2.0, avg_loss=1.5, profit_factor=2.0, max_drawdown_pct=-3.0, avg_duration=5.0,
    )
    # 60 * 0.4 + 2 * 30 + 0.6 * 30
    assert comparison_score(stats) == pytest.approx(102.0)


def test_compare_strategies_sorted():
    comparisons = compare_strategies(simulated_candles(300, seed=4), signal_threshold=60)
    assert {c.strategy for c in comparisons} == set(StrategyName)
    assert comparisons[0].score >= comparisons[1].score


def test_engine_warmup(make_series):
    candles = make_series([100.0] * 80)
    late = BacktestEngine("momentum", signal_threshold=0, thresholds=ALWAYS_TRADE, warmup=40).run(candles)
    assert [t.entry_index for t in late.trades] == [40]
    assert BacktestEngine("momentum", thresholds=ALWAYS_TRADE, warmup=10).warmup == 30
