"""Human-readable rendering of arbitrage opportunities for logs."""

import math

from ..models import ArbitrageOpportunity
from ..utils.formatting import format_jpy, format_percentage


def _yen(value) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "n/a"
    # ints are exact at any size
    if isinstance(value, float) and not math.isfinite(value):
        return "n/a"
    return format_jpy(value)


def format_opportunity_message(opportunity: ArbitrageOpportunity) -> str:
    """One-line summary of an opportunity. Never raises."""
    def get(name):
        return getattr(opportunity, name, None)

    exchange_from = get("exchange_from") or "?"
    exchange_to = get("exchange_to") or "?"
    status = "PROFITABLE" if get("is_profitable_after_fees") is True else "UNPROFITABLE"

    return (
        f"{exchange_from} -> {exchange_to} | "
        f"Buy {_yen(get('price_from'))} Sell {_yen(get('price_to'))} | "
        f"Spread {_yen(get('price_difference'))} "
        f"({format_percentage(get('percentage_difference'))}) | "
        f"Net {_yen(get('net_profit'))} "
        f"({format_percentage(get('net_profit_percentage'))}) | "
        f"Fees {_yen(get('total_fees'))} | {status}"
    )
