"""Aggregates per-exchange price sources into one snapshot."""

import asyncio
from typing import Iterable

import httpx

from .base import BasePriceSource
from .ticker import DEFAULT_ENDPOINTS, TickerClient, TickerEndpoint
from ..exceptions import ClientError
from ..logging import feed_logger as logger
from ..models import PriceQuote


class PriceFeed:
    """Polls a set of price sources concurrently.

    A source that fails is left out of that cycle's snapshot.
    """

    def __init__(self, sources: Iterable[BasePriceSource]):
        self.sources = list(sources)
        self._http: httpx.AsyncClient | None = None

    @classmethod
    def from_endpoints(
        cls,
        endpoints: Iterable[TickerEndpoint] = DEFAULT_ENDPOINTS,
        timeout: float = 5.0,
    ) -> "PriceFeed":
        """Build a feed of ticker clients sharing one HTTP client."""
        http = httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=3.0))
        feed = cls(TickerClient(ep, timeout=timeout, http=http) for ep in endpoints)
        feed._http = http
        return feed

    async def connect(self) -> None:
        """Connect all sources."""
        await asyncio.gather(*(source.connect() for source in self.sources))
        logger.info(f"Price feed connected to {len(self.sources)} exchanges")

    async def close(self) -> None:
        """Close all sources and the shared HTTP client."""
        await asyncio.gather(
            *(source.close() for source in self.sources), return_exceptions=True
        )
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def get_snapshot(self) -> list[PriceQuote]:
        """Fetch a quote from every source.

        Returns:
            Quotes in source order, without the sources that failed.
        """
        results = await asyncio.gather(
            *(source.get_quote() for source in self.sources),
            return_exceptions=True,
        )

        quotes = []
        for source, result in zip(self.sources, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, ClientError):
                logger.warning(f"{source.exchange}: {result}")
            elif isinstance(result, BaseException):
                logger.error(f"Unexpected error from {source.exchange}: {result!r}")
            else:
                quotes.append(result)
        return quotes

    async def __aenter__(self) -> "PriceFeed":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
