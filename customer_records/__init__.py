"""Customer records service: customers, their addresses, and the store behind them."""

__version__ = "1.0.0"
