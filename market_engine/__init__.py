"""Technical analysis, strategy scoring and take-profit-ladder backtesting for OHLCV candles."""

__version__ = "0.1.0"
