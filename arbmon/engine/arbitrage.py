"""Arbitrage detection engine."""

import math
from itertools import permutations
from typing import Iterable

from ..config import DetectorConfig
from ..exceptions import InvalidQuoteError, NonFiniteResultError
from ..fees import DEFAULT_FEE_TABLE, FeeTable
from ..logging import engine_logger as logger
from ..models import ArbitrageOpportunity, PriceQuote, PriceSnapshot
from .formatter import format_opportunity_message
from .profitability import calculate_arbitrage_costs


def latest_quotes(snapshot: Iterable[PriceQuote]) -> dict[str, PriceQuote]:
    """Valid quotes keyed by exchange; the last quote seen for an exchange wins.

    Invalid quotes are logged and left out. A later invalid quote does not
    displace an earlier valid one.
    """
    quotes: dict[str, PriceQuote] = {}
    for quote in snapshot:
        try:
            quote.validate()
        except InvalidQuoteError as e:
            logger.warning(f"Skipping quote: {e}")
            continue

        if quote.exchange in quotes:
            logger.debug(f"Duplicate quote for {quote.exchange}, keeping latest")
            # Re-insert so iteration order follows the latest position
            del quotes[quote.exchange]
        quotes[quote.exchange] = quote
    return quotes


def _check_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise NonFiniteResultError(name, value)


def evaluate_pair(
    buy: PriceQuote,
    sell: PriceQuote,
    fees: FeeTable = DEFAULT_FEE_TABLE,
    config: DetectorConfig = DetectorConfig(),
) -> ArbitrageOpportunity | None:
    """Cost out buying on ``buy`` and selling on ``sell``.

    Returns None when the sell price is not above the buy price.

    Raises:
        NonFiniteResultError: If any derived value is NaN or infinite.
    """
    price_difference = sell.price - buy.price
    _check_finite(price_difference=price_difference)
    if price_difference <= 0:
        return None

    percentage_difference = abs(price_difference) / buy.price * 100
    amount = config.trade_amount

    costs = calculate_arbitrage_costs(
        buy.exchange, sell.exchange, amount, buy.price, sell.price, fees
    )
    net_profit_percentage = costs.net_profit / (amount * buy.price) * 100

    _check_finite(
        percentage_difference=percentage_difference,
        gross_profit=costs.gross_profit,
        net_profit=costs.net_profit,
        net_profit_percentage=net_profit_percentage,
        total_fees=costs.total_costs.total,
    )

    return ArbitrageOpportunity(
        exchange_from=buy.exchange,
        exchange_to=sell.exchange,
        price_from=buy.price,
        price_to=sell.price,
        price_difference=price_difference,
        percentage_difference=percentage_difference,
        gross_profit=costs.gross_profit,
        net_profit=costs.net_profit,
        net_profit_percentage=net_profit_percentage,
        total_fees=costs.total_costs.total,
        is_profitable_after_fees=costs.net_profit > 0,
        timestamp=max(buy.quoted_at, sell.quoted_at),
    )


def passes_threshold(opportunity: ArbitrageOpportunity, config: DetectorConfig) -> bool:
    """Whether an opportunity clears the configured reporting policy."""
    if opportunity.price_difference <= 0:
        return False
    if config.only_profitable and not opportunity.is_profitable_after_fees:
        return False
    if (
        config.min_net_profit_percentage is not None
        and opportunity.net_profit_percentage < config.min_net_profit_percentage
    ):
        return False
    return True


def rank_opportunities(
    opportunities: Iterable[ArbitrageOpportunity],
) -> list[ArbitrageOpportunity]:
    """Best net profit % first; ties broken by (exchange_from, exchange_to)."""
    return sorted(
        opportunities,
        key=lambda o: (-o.net_profit_percentage, o.exchange_from, o.exchange_to),
    )


def detect_arbitrage_opportunities(
    snapshot: PriceSnapshot,
    fees: FeeTable = DEFAULT_FEE_TABLE,
    config: DetectorConfig = DetectorConfig(),
) -> list[ArbitrageOpportunity]:
    """Find every exchange pair where buying low and selling high is possible.

    Every ordered pair of distinct exchanges is checked with the first as the
    buy side. Invalid quotes and pairs with non-finite results are skipped;
    the scan never aborts.

    Args:
        snapshot: Quotes from one polling cycle
        fees: Fee table used for costing
        config: Reporting policy and trade size

    Returns:
        Opportunities sorted by net profit percentage, descending.
    """
    quotes = latest_quotes(snapshot)
    if len(quotes) < 2:
        return []

    opportunities = []
    for buy, sell in permutations(quotes.values(), 2):
        try:
            opportunity = evaluate_pair(buy, sell, fees, config)
        except NonFiniteResultError as e:
            logger.warning(f"Skipping {buy.exchange} -> {sell.exchange}: {e}")
            continue

        if opportunity is None or not passes_threshold(opportunity, config):
            continue
        opportunities.append(opportunity)

    ranked = rank_opportunities(opportunities)
    if ranked:
        profitable = sum(1 for o in ranked if o.is_profitable_after_fees)
        logger.debug(
            f"Detected {len(ranked)} opportunities ({profitable} profitable after fees) "
            f"across {len(quotes)} exchanges"
        )
    return ranked


class ArbitrageDetector:
    """Detector bound to a fee table and policy.

    Holds no per-call state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        fees: FeeTable = DEFAULT_FEE_TABLE,
        config: DetectorConfig | None = None,
    ):
        self.fees = fees
        self.config = config or DetectorConfig()
        self.config.validate()

    def detect(self, snapshot: PriceSnapshot) -> list[ArbitrageOpportunity]:
        """Detect and rank opportunities in a snapshot."""
        return detect_arbitrage_opportunities(snapshot, self.fees, self.config)

    def format_opportunity_message(self, opportunity: ArbitrageOpportunity) -> str:
        """Render an opportunity for the log."""
        return format_opportunity_message(opportunity)
