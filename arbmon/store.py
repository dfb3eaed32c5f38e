"""Storage of detected opportunities and observed prices."""

from abc import ABC, abstractmethod
from collections import deque
from typing import Sequence

from .models import ArbitrageOpportunity, PriceQuote


class BaseOpportunityStore(ABC):
    """Abstract store the runner hands each cycle's results to."""

    @abstractmethod
    async def save_prices(self, quotes: Sequence[PriceQuote]) -> None:
        """Persist the quotes of one polling cycle."""
        pass

    @abstractmethod
    async def save_opportunities(
        self, opportunities: Sequence[ArbitrageOpportunity]
    ) -> None:
        """Persist the ranked opportunities of one polling cycle."""
        pass

    @abstractmethod
    async def get_recent_opportunities(self, limit: int = 50) -> list[dict]:
        """Most recent opportunities first, as wire dicts."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove all stored prices and opportunities."""
        pass


class InMemoryOpportunityStore(BaseOpportunityStore):
    """Bounded in-process history; oldest entries drop off first."""

    def __init__(self, max_size: int = 500):
        self._prices: deque[PriceQuote] = deque(maxlen=max_size)
        self._opportunities: deque[dict] = deque(maxlen=max_size)

    @property
    def latest_prices(self) -> list[PriceQuote]:
        """Quotes saved most recently, newest last."""
        return list(self._prices)

    async def save_prices(self, quotes: Sequence[PriceQuote]) -> None:
        self._prices.extend(quotes)

    async def save_opportunities(
        self, opportunities: Sequence[ArbitrageOpportunity]
    ) -> None:
        self._opportunities.extend(o.to_dict() for o in opportunities)

    async def get_recent_opportunities(self, limit: int = 50) -> list[dict]:
        if limit <= 0:
            return []
        return list(reversed(self._opportunities))[:limit]

    async def clear(self) -> None:
        self._prices.clear()
        self._opportunities.clear()
