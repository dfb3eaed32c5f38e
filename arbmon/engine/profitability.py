"""Trade-leg and round-trip cost calculation."""

import math

from ..exceptions import InvalidArgumentError
from ..fees import DEFAULT_FEE_TABLE, FeeTable, get_trading_fee, get_withdrawal_fee
from ..models import (
    ArbitrageCosts,
    CostBreakdown,
    CostDetail,
    CurrencyKind,
    FeeTier,
    Side,
    TradingCosts,
)


def require_positive(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(name, value, "a positive finite number")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite or value <= 0:
        raise InvalidArgumentError(name, value, "a positive finite number")
    return value


def _coerce_side(side: Side | str) -> Side:
    try:
        return Side(side)
    except ValueError:
        raise InvalidArgumentError("side", side, "'buy' or 'sell'") from None


def _coerce_tier(tier: FeeTier | str) -> FeeTier:
    try:
        return FeeTier(tier)
    except ValueError:
        raise InvalidArgumentError("tier", tier, "'maker' or 'taker'") from None


def calculate_trading_costs(
    exchange: str,
    amount: float,
    price: float,
    side: Side | str = Side.BUY,
    tier: FeeTier | str = FeeTier.TAKER,
    fees: FeeTable = DEFAULT_FEE_TABLE,
) -> TradingCosts:
    """Cost of one trade leg.

    The fee is charged as ``|fee_rate| * trade_value``: a negative maker rate
    (rebate) is counted as a cost of the same size, not as income.

    Args:
        exchange: Exchange name
        amount: Quantity in BTC
        price: Price per BTC in JPY
        side: buy adds the fee to the trade value, sell subtracts it
        tier: maker or taker rate
        fees: Fee table to look rates up in

    Returns:
        TradingCosts for the leg.

    Raises:
        InvalidArgumentError: Non-positive amount/price or unknown side/tier.
    """
    amount = require_positive("amount", amount)
    price = require_positive("price", price)
    side = _coerce_side(side)
    tier = _coerce_tier(tier)

    trade_value = amount * price
    rates = get_trading_fee(exchange, fees)
    fee_rate = rates.maker if tier is FeeTier.MAKER else rates.taker
    trading_fee = abs(fee_rate) * trade_value

    if side is Side.BUY:
        net_value = trade_value + trading_fee
    else:
        net_value = trade_value - trading_fee

    return TradingCosts(
        exchange=exchange,
        side=side,
        tier=tier,
        trade_value=trade_value,
        fee_rate=fee_rate,
        trading_fee=trading_fee,
        net_value=net_value,
    )


def calculate_arbitrage_costs(
    buy_exchange: str,
    sell_exchange: str,
    amount: float,
    buy_price: float,
    sell_price: float,
    fees: FeeTable = DEFAULT_FEE_TABLE,
) -> ArbitrageCosts:
    """Full cost and net profit of buying on one exchange and selling on another.

    Both legs are taken at taker rates. The JPY withdrawal fee is charged by
    the sell exchange; moving BTC costs the network fee plus the buy
    exchange's BTC withdrawal fee, both as a fraction of the buy-side value.
    """
    buy_leg = calculate_trading_costs(
        buy_exchange, amount, buy_price, Side.BUY, FeeTier.TAKER, fees
    )
    sell_leg = calculate_trading_costs(
        sell_exchange, amount, sell_price, Side.SELL, FeeTier.TAKER, fees
    )

    gross_profit = amount * (sell_price - buy_price)

    crypto_withdrawal = get_withdrawal_fee(buy_exchange, CurrencyKind.CRYPTO, fees)
    total_costs = CostBreakdown(
        buy_trading_fee=buy_leg.trading_fee,
        sell_trading_fee=sell_leg.trading_fee,
        fiat_withdrawal_fee=get_withdrawal_fee(sell_exchange, CurrencyKind.FIAT, fees),
        crypto_transfer_cost=(fees.network_fee + crypto_withdrawal) * buy_leg.trade_value,
    )

    net_profit = gross_profit - total_costs.total

    return ArbitrageCosts(
        gross_profit=gross_profit,
        total_costs=total_costs,
        net_profit=net_profit,
        profit_reduction=gross_profit - net_profit,
        cost_breakdown=CostDetail(
            buy_exchange=buy_leg,
            sell_exchange=sell_leg,
            network_fee=fees.network_fee,
        ),
    )
