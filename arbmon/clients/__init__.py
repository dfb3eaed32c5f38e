"""Price sources for BTC/JPY exchanges."""

from dotenv import load_dotenv

load_dotenv()

from .base import BasePriceSource
from .feed import PriceFeed
from .ticker import DEFAULT_ENDPOINTS, TickerClient, TickerEndpoint

__all__ = [
    "BasePriceSource",
    "DEFAULT_ENDPOINTS",
    "PriceFeed",
    "TickerClient",
    "TickerEndpoint",
]
