"""Arbitrage engine components."""

from .arbitrage import ArbitrageDetector, detect_arbitrage_opportunities
from .formatter import format_opportunity_message
from .profitability import calculate_arbitrage_costs, calculate_trading_costs
from .spread import calculate_minimum_profitable_spread

__all__ = [
    "ArbitrageDetector",
    "calculate_arbitrage_costs",
    "calculate_minimum_profitable_spread",
    "calculate_trading_costs",
    "detect_arbitrage_opportunities",
    "format_opportunity_message",
]
