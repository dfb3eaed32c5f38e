"""Minimum spread required for a profitable round trip."""

from ..fees import DEFAULT_FEE_TABLE, FeeTable
from ..models import SpreadRequirement
from .profitability import require_positive, calculate_arbitrage_costs

# BTC/JPY price the per-unit costs are evaluated at
REFERENCE_PRICE = 5_000_000

# Safety margin over the pure break-even spread
BREAK_EVEN_MARGIN = 1.1


def calculate_minimum_profitable_spread(
    buy_exchange: str,
    sell_exchange: str,
    amount: float = 1,
    reference_price: float = REFERENCE_PRICE,
    fees: FeeTable = DEFAULT_FEE_TABLE,
) -> SpreadRequirement:
    """Spread per BTC at which net profit reaches zero.

    Costs are evaluated with both legs at ``reference_price``; the total is
    spread over ``amount``, so fixed withdrawal fees weigh less on larger
    trades.

    Raises:
        InvalidArgumentError: Non-positive amount or reference price.
    """
    amount = require_positive("amount", amount)
    reference_price = require_positive("reference_price", reference_price)

    costs = calculate_arbitrage_costs(
        buy_exchange,
        sell_exchange,
        amount,
        reference_price,
        reference_price,
        fees,
    )
    total = costs.total_costs.total
    min_spread = total / amount

    return SpreadRequirement(
        buy_exchange=buy_exchange,
        sell_exchange=sell_exchange,
        amount=amount,
        reference_price=reference_price,
        total_costs=total,
        min_spread=min_spread,
        min_spread_percentage=min_spread / reference_price * 100,
        break_even_spread=min_spread * BREAK_EVEN_MARGIN,
    )
