"""Data models for cross-exchange arbitrage monitoring."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Sequence

from .exceptions import InvalidQuoteError


class Side(str, Enum):
    """Trade side."""
    BUY = "buy"
    SELL = "sell"


class FeeTier(str, Enum):
    """Liquidity tier that determines the trading fee rate."""
    MAKER = "maker"
    TAKER = "taker"


class CurrencyKind(str, Enum):
    """Currency a withdrawal fee is charged in."""
    FIAT = "fiat"
    CRYPTO = "crypto"


def parse_timestamp(value: Any) -> datetime:
    """Parse a quote timestamp into an aware datetime.

    Accepts a datetime, an ISO-8601 string, or epoch seconds. Naive values
    are treated as UTC.

    Raises:
        ValueError: If the value cannot be interpreted as an instant.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        raise ValueError(f"not a timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"not a timestamp: {value!r}")
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"not a timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value) and value > 0
    except OverflowError:
        # int beyond float range
        return False


@dataclass(frozen=True)
class PriceQuote:
    """Ticker snapshot from a single exchange."""
    exchange: str
    price: float  # last traded price
    bid: float
    ask: float
    timestamp: datetime | str | float = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def from_dict(cls, data: dict) -> "PriceQuote":
        """Build a quote from a wire dict (exchange, price, bid, ask, timestamp)."""
        kwargs = {
            "exchange": data.get("exchange", ""),
            "price": data.get("price"),
            "bid": data.get("bid"),
            "ask": data.get("ask"),
        }
        if data.get("timestamp") is not None:
            kwargs["timestamp"] = data["timestamp"]
        return cls(**kwargs)

    @property
    def spread(self) -> float:
        """Bid-ask spread."""
        return self.ask - self.bid

    @property
    def mid_price(self) -> float:
        """Mid price between bid and ask."""
        return (self.bid + self.ask) / 2

    @property
    def quoted_at(self) -> datetime:
        """Timestamp as an aware datetime."""
        return parse_timestamp(self.timestamp)

    def validate(self) -> None:
        """Check the quote is usable for pairing.

        Raises:
            InvalidQuoteError: On empty exchange, non-finite or non-positive
                numbers, bid above price, ask below price, or a bad timestamp.
        """
        if not isinstance(self.exchange, str) or not self.exchange.strip():
            raise InvalidQuoteError(str(self.exchange or ""), "empty exchange name")

        for name in ("price", "bid", "ask"):
            value = getattr(self, name)
            if not _is_positive_number(value):
                raise InvalidQuoteError(
                    self.exchange, f"{name} must be positive and finite, got {value!r}"
                )

        if self.bid > self.price:
            raise InvalidQuoteError(
                self.exchange, f"bid {self.bid} above price {self.price}"
            )
        if self.ask < self.price:
            raise InvalidQuoteError(
                self.exchange, f"ask {self.ask} below price {self.price}"
            )

        try:
            parse_timestamp(self.timestamp)
        except (ValueError, TypeError, OverflowError, OSError) as e:
            raise InvalidQuoteError(self.exchange, f"bad timestamp: {e}") from e

    @property
    def is_valid(self) -> bool:
        """Whether the quote passes validation."""
        try:
            self.validate()
        except InvalidQuoteError:
            return False
        return True


PriceSnapshot = Sequence[PriceQuote]


@dataclass(frozen=True)
class TradingCosts:
    """Cost of a single trade leg on one exchange."""
    exchange: str
    side: Side
    tier: FeeTier
    trade_value: float
    fee_rate: float
    trading_fee: float
    net_value: float


@dataclass(frozen=True)
class CostBreakdown:
    """Components of a round-trip arbitrage cost, in JPY."""
    buy_trading_fee: float
    sell_trading_fee: float
    fiat_withdrawal_fee: float
    crypto_transfer_cost: float

    @property
    def total(self) -> float:
        """Sum of all cost components."""
        return (
            self.buy_trading_fee
            + self.sell_trading_fee
            + self.fiat_withdrawal_fee
            + self.crypto_transfer_cost
        )


@dataclass(frozen=True)
class CostDetail:
    """Per-venue detail behind a cost breakdown."""
    buy_exchange: TradingCosts
    sell_exchange: TradingCosts
    network_fee: float


@dataclass(frozen=True)
class ArbitrageCosts:
    """Result of a full buy/sell round-trip cost calculation."""
    gross_profit: float
    total_costs: CostBreakdown
    net_profit: float
    profit_reduction: float
    cost_breakdown: CostDetail


@dataclass(frozen=True)
class SpreadRequirement:
    """Minimum spread needed for a round trip to break even."""
    buy_exchange: str
    sell_exchange: str
    amount: float
    reference_price: float
    total_costs: float
    min_spread: float
    min_spread_percentage: float
    break_even_spread: float


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """Buy on exchange_from, sell on exchange_to."""
    exchange_from: str
    exchange_to: str
    price_from: float
    price_to: float
    price_difference: float
    percentage_difference: float
    gross_profit: float
    net_profit: float
    net_profit_percentage: float
    total_fees: float
    is_profitable_after_fees: bool
    timestamp: datetime

    def to_dict(self) -> dict:
        """Wire representation for storage and broadcast."""
        return {
            "exchangeFrom": self.exchange_from,
            "exchangeTo": self.exchange_to,
            "priceFrom": self.price_from,
            "priceTo": self.price_to,
            "priceDifference": self.price_difference,
            "percentageDifference": self.percentage_difference,
            "grossProfit": self.gross_profit,
            "netProfit": self.net_profit,
            "netProfitPercentage": self.net_profit_percentage,
            "totalFees": self.total_fees,
            "isProfitableAfterFees": self.is_profitable_after_fees,
            "timestamp": self.timestamp.isoformat(),
        }
