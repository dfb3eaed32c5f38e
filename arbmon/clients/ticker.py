"""Public JSON ticker client."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from .base import BasePriceSource
from ..exceptions import NotConnectedError, PriceFetchError
from ..logging import feed_logger as logger
from ..models import PriceQuote


@dataclass(frozen=True)
class TickerEndpoint:
    """Where an exchange publishes its ticker and how to read it.

    Field paths are dotted; numeric segments index into lists
    (e.g. ``data.0.last``).
    """
    exchange: str
    url: str
    price_field: str
    bid_field: str
    ask_field: str
    params: tuple[tuple[str, str], ...] = ()


# Public BTC/JPY ticker endpoints. BITPoint has a fee schedule but no
# unauthenticated ticker, so its quotes come from a custom BasePriceSource.
DEFAULT_ENDPOINTS = (
    TickerEndpoint(
        exchange="bitFlyer",
        url="https://api.bitflyer.com/v1/ticker",
        price_field="ltp",
        bid_field="best_bid",
        ask_field="best_ask",
        params=(("product_code", "BTC_JPY"),),
    ),
    TickerEndpoint(
        exchange="Coincheck",
        url="https://coincheck.com/api/ticker",
        price_field="last",
        bid_field="bid",
        ask_field="ask",
        params=(("pair", "btc_jpy"),),
    ),
    TickerEndpoint(
        exchange="Zaif",
        url="https://api.zaif.jp/api/1/ticker/btc_jpy",
        price_field="last",
        bid_field="bid",
        ask_field="ask",
    ),
    TickerEndpoint(
        exchange="GMOコイン",
        url="https://api.coin.z.com/public/v1/ticker",
        price_field="data.0.last",
        bid_field="data.0.bid",
        ask_field="data.0.ask",
        params=(("symbol", "BTC"),),
    ),
    TickerEndpoint(
        exchange="bitbank",
        url="https://public.bitbank.cc/btc_jpy/ticker",
        price_field="data.last",
        bid_field="data.buy",
        ask_field="data.sell",
    ),
)


def extract_field(payload: Any, path: str) -> Any:
    """Follow a dotted path through nested dicts and lists.

    Raises:
        KeyError: If a segment is missing.
    """
    value = payload
    for segment in path.split("."):
        if isinstance(value, list):
            try:
                value = value[int(segment)]
            except (ValueError, IndexError):
                raise KeyError(path) from None
        elif isinstance(value, dict) and segment in value:
            value = value[segment]
        else:
            raise KeyError(path)
    return value


class TickerClient(BasePriceSource):
    """Fetches one exchange's public ticker over HTTP.

    The client is bound to a single endpoint. Numeric fields may arrive as
    strings and are converted to float.
    """

    def __init__(
        self,
        endpoint: TickerEndpoint,
        timeout: float = 5.0,
        http: httpx.AsyncClient | None = None,
    ):
        """Initialize ticker client.

        Args:
            endpoint: Ticker endpoint description.
            timeout: Total request timeout in seconds.
            http: Shared HTTP client. If given, close() leaves it open.
        """
        self.endpoint = endpoint
        self.exchange = endpoint.exchange
        self.timeout = timeout
        self._http = http
        self._owns_http = http is None

    @property
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self._http is not None

    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=3.0)
            )
            self._owns_http = True
        logger.debug(f"Ticker client ready for {self.exchange}")

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http and self._owns_http:
            await self._http.aclose()
        self._http = None

    def _ensure_connected(self) -> None:
        """Raise if not connected."""
        if not self.is_connected:
            raise NotConnectedError("Client not connected. Call connect() first.")

    async def get_quote(self) -> PriceQuote:
        """Fetch and parse the ticker."""
        self._ensure_connected()

        try:
            resp = await self._http.get(
                self.endpoint.url, params=dict(self.endpoint.params)
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            raise PriceFetchError(self.exchange, str(e)) from e
        except ValueError as e:
            raise PriceFetchError(self.exchange, f"invalid JSON: {e}") from e

        return self.parse_ticker(payload)

    def parse_ticker(self, payload: Any) -> PriceQuote:
        """Map a ticker payload to a PriceQuote.

        Raises:
            PriceFetchError: If a field is missing or not numeric.
        """
        try:
            price = float(extract_field(payload, self.endpoint.price_field))
            bid = float(extract_field(payload, self.endpoint.bid_field))
            ask = float(extract_field(payload, self.endpoint.ask_field))
        except KeyError as e:
            raise PriceFetchError(self.exchange, f"missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise PriceFetchError(self.exchange, f"non-numeric field: {e}") from e

        return PriceQuote(
            exchange=self.exchange,
            price=price,
            bid=bid,
            ask=ask,
            timestamp=datetime.now(timezone.utc),
        )
