#!/usr/bin/env python3
"""
Market engine CLI: backtest | compare | analyze
Usage:
  python main.py backtest [--config config.yaml] [--csv candles.csv] [--strategy momentum]
  python main.py compare [--csv candles.csv]
  python main.py analyze [--csv candles.csv]
Without --csv (or backtest.candles_csv / CANDLES_CSV) a seeded simulated series is used.
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from market_engine.analytics.insights import strategy_insights
from market_engine.backtesting.engine import BacktestEngine, compare_strategies
from market_engine.core.config import Config, load_config
from market_engine.core.errors import InsufficientData
from market_engine.core.logger import setup_logging
from market_engine.core.types import Candle, StrategyName
from market_engine.strategies.analysis import analyze_market
from market_engine.utils.candles import load_candles_csv
from market_engine.utils.simulate import simulated_candles

logger = logging.getLogger("market_engine.cli")


def load_candles(config: Config, csv_path: Optional[Path]) -> List[Candle]:
    path = csv_path or config.candles_csv
    if path:
        logger.info("Loading candles from %s", path)
        return load_candles_csv(path)
    logger.info("No candle file configured, simulating %d candles (seed=%d)", config.simulate_count, config.simulate_seed)
    return simulated_candles(
        config.simulate_count,
        start_price=config.start_price,
        seed=config.simulate_seed,
        timeframe=config.timeframe,
    )


def run_backtest(config: Config, candles: List[Candle], strategy: StrategyName) -> int:
    engine = BacktestEngine(
        strategy,
        signal_threshold=config.signal_threshold,
        max_hold=config.max_hold_candles,
        thresholds=config.thresholds,
        warmup=config.warmup_candles,
    )
    result = engine.run(candles)
    s = result.stats
    print("\n--- Backtest Results ---")
    print(f"Strategy: {strategy.value} (threshold {config.signal_threshold:.0f}/100, {result.candles_analyzed} candles)")
    print(f"Total trades: {s.total_trades} (wins: {s.wins}, losses: {s.losses}, partials: {s.partials})")
    print(f"Win rate: {s.win_rate:.1f}%")
    print(f"Total PnL: {s.total_pnl:.2f} (avg {s.avg_pnl:.2f}/trade)")
    print(f"Avg win: {s.avg_win:.2f} | Avg loss: {s.avg_loss:.2f}")
    print(f"Profit factor: {s.profit_factor:.2f}")
    print(f"Max drawdown: {s.max_drawdown_pct:.2f}%")
    print("Exits: " + ", ".join(f"{reason.value}={count}" for reason, count in s.exit_reasons.items()))
    verdict, insights = strategy_insights(s)
    print(f"Verdict: {verdict.value}")
    for line in insights:
        print(f"  - {line}")
    return 0


def run_compare(config: Config, candles: List[Candle]) -> int:
    ranking = compare_strategies(
        candles,
        signal_threshold=config.signal_threshold,
        max_hold=config.max_hold_candles,
        thresholds=config.thresholds,
        warmup=config.warmup_candles,
    )
    print("\n--- Strategy Comparison ---")
    for rank, c in enumerate(ranking, start=1):
        print(
            f"{rank}. {c.strategy.value}: score {c.score:.0f} | trades {c.stats.total_trades} | "
            f"win rate {c.stats.win_rate:.1f}% | PF {c.stats.profit_factor:.2f} | PnL {c.stats.total_pnl:.2f}"
        )
    if ranking:
        print(f"Best strategy: {ranking[0].strategy.value}")
    return 0


def run_analyze(config: Config, candles: List[Candle]) -> int:
    window = candles[-(config.thresholds.setup_lookback + 1):]
    try:
        analysis = analyze_market(window, config.thresholds)
    except InsufficientData as e:
        logger.error("Cannot analyze: %s", e)
        return 1
    ind = analysis.indicators
    st = analysis.structure
    print("\n--- Market Analysis ---")
    print(f"EMA fast/slow: {ind.ema_fast:.4f} / {ind.ema_slow:.4f} | RSI: {ind.rsi:.1f}")
    print(f"Bollinger: {ind.bollinger.lower:.4f} / {ind.bollinger.middle:.4f} / {ind.bollinger.upper:.4f}")
    c = analysis.conditions
    print(f"Conditions: trend={c.trend.value} volatility={c.volatility.value} "
          f"volume={c.volume_trend.value} momentum={c.momentum.value}")
    print(f"Regime: {st.regime.regime.value} ({st.regime.volatility.value} vol, {st.regime.confidence}%)")
    print(f"Sweep: {st.sweep.description}")
    print(f"Pattern: {st.pattern.kind.value} ({st.pattern.confidence}%)")
    for score in (analysis.momentum, analysis.mean_reversion):
        print(f"{score.strategy.value}: {score.score:.1f}/100")
        for line in score.reasoning:
            print(f"  {line}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Market engine CLI")
    parser.add_argument("mode", choices=["backtest", "compare", "analyze"], help="What to run")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--csv", type=Path, default=None, help="OHLCV CSV (time, open, high, low, close, volume)")
    parser.add_argument("--strategy", choices=[s.value for s in StrategyName], default=None, help="Override strategy")
    args = parser.parse_args()

    config = load_config(args.config, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    candles = load_candles(config, args.csv)
    if args.mode == "backtest":
        strategy = StrategyName(args.strategy) if args.strategy else config.strategy
        return run_backtest(config, candles, strategy)
    if args.mode == "compare":
        return run_compare(config, candles)
    return run_analyze(config, candles)


if __name__ == "__main__":
    sys.exit(main())
