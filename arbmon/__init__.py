"""Cross-exchange BTC/JPY arbitrage monitor."""

__version__ = "0.1.0"
