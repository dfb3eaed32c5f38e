"""Base client abstract class for exchange price sources."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import PriceQuote


class BasePriceSource(ABC):
    """Abstract base class for a single exchange's price source.

    Each instance is bound to one exchange.
    Supports async context manager for automatic resource cleanup.

    Usage:
        async with SomeSource(...) as source:
            quote = await source.get_quote()
    """

    exchange: str

    @abstractmethod
    async def connect(self) -> None:
        """Open connections to the exchange.

        Called automatically when using context manager.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connections and release resources.

        Called automatically when using context manager.
        """
        pass

    @abstractmethod
    async def get_quote(self) -> PriceQuote:
        """Get the current ticker for the bound exchange.

        Returns:
            PriceQuote with last price, best bid and best ask.

        Raises:
            NotConnectedError: If not connected.
            PriceFetchError: If the request or response parsing fails.
        """
        pass

    async def __aenter__(self) -> "BasePriceSource":
        """Enter async context manager."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()
