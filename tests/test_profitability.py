"""Tests for trade-leg and round-trip cost calculation."""

import math

import pytest

from arbmon.engine.profitability import calculate_arbitrage_costs, calculate_trading_costs
from arbmon.exceptions import InvalidArgumentError
from arbmon.models import FeeTier, Side


class TestCalculateTradingCosts:
    """Test single-leg trading costs."""

    def test_buy_taker(self):
        result = calculate_trading_costs("bitFlyer", 1, 5_000_000, "buy", "taker")

        assert result.trade_value == 5_000_000
        assert result.fee_rate == 0.0015
        assert result.trading_fee == pytest.approx(7_500)
        assert result.net_value == pytest.approx(5_007_500)

    def test_sell_taker(self):
        result = calculate_trading_costs("bitFlyer", 1, 5_000_000, Side.SELL, FeeTier.TAKER)

        assert result.trading_fee == pytest.approx(7_500)
        assert result.net_value == pytest.approx(4_992_500)

    def test_maker_tier(self):
        result = calculate_trading_costs("bitFlyer", 1, 5_000_000, "buy", "maker")

        assert result.fee_rate == 0.0001
        assert result.trading_fee == pytest.approx(500)
        assert result.net_value == pytest.approx(5_000_500)

    def test_negative_maker_fee_charged_as_cost(self):
        """A maker rebate is counted by magnitude, as a cost."""
        result = calculate_trading_costs("GMOコイン", 1, 5_000_000, "buy", "maker")

        assert result.fee_rate == -0.0001
        assert result.trading_fee == pytest.approx(500)
        assert result.net_value == pytest.approx(5_000_500)

    def test_fractional_amount(self):
        result = calculate_trading_costs("bitFlyer", 0.5, 5_000_000, "buy", "taker")

        assert result.trade_value == 2_500_000
        assert result.trading_fee == pytest.approx(3_750)
        assert result.net_value == pytest.approx(2_503_750)

    def test_records_leg_identity(self):
        result = calculate_trading_costs("Coincheck", 1, 5_000_000, "sell", "maker")

        assert result.exchange == "Coincheck"
        assert result.side is Side.SELL
        assert result.tier is FeeTier.MAKER

    @pytest.mark.parametrize("amount", [0, -1, math.nan, math.inf, 10**400, "1", None, True])
    def test_invalid_amount(self, amount):
        with pytest.raises(InvalidArgumentError, match="amount"):
            calculate_trading_costs("bitFlyer", amount, 5_000_000, "buy", "taker")

    def test_invalid_price(self):
        with pytest.raises(InvalidArgumentError, match="price"):
            calculate_trading_costs("bitFlyer", 1, 0, "buy", "taker")

    def test_price_beyond_float_range(self):
        with pytest.raises(InvalidArgumentError, match="price"):
            calculate_trading_costs("bitFlyer", 1, 10**400, "sell", "taker")

    def test_invalid_side(self):
        with pytest.raises(InvalidArgumentError, match="side"):
            calculate_trading_costs("bitFlyer", 1, 5_000_000, "hold", "taker")

    def test_invalid_tier(self):
        with pytest.raises(InvalidArgumentError, match="tier"):
            calculate_trading_costs("bitFlyer", 1, 5_000_000, "buy", "vip")

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            calculate_trading_costs("bitFlyer", -1, 5_000_000)


class TestCalculateArbitrageCosts:
    """Test round-trip arbitrage costs."""

    def test_gross_and_net_profit(self):
        result = calculate_arbitrage_costs("bitFlyer", "Coincheck", 1, 5_000_000, 5_100_000)

        assert result.gross_profit == 100_000
        assert result.net_profit < result.gross_profit
        assert result.profit_reduction > 0

    def test_cost_components(self):
        result = calculate_arbitrage_costs("bitFlyer", "Coincheck", 1, 5_000_000, 5_100_000)
        costs = result.total_costs

        assert costs.buy_trading_fee == pytest.approx(7_500)
        assert costs.sell_trading_fee == 0
        assert costs.fiat_withdrawal_fee == 407
        assert costs.total == pytest.approx(7_500 + 0 + 407 + 2_500)

    def test_network_transfer_cost(self):
        """Network fee plus the buy exchange's BTC withdrawal fee."""
        result = calculate_arbitrage_costs("bitFlyer", "Coincheck", 1, 5_000_000, 5_100_000)

        expected = (0.0001 + 0.0004) * 5_000_000
        assert result.total_costs.crypto_transfer_cost == pytest.approx(expected)

    def test_zero_fee_exchanges(self):
        """Only the network fee applies between zero-fee exchanges."""
        result = calculate_arbitrage_costs("BITPoint", "GMOコイン", 1, 5_000_000, 5_100_000)

        assert result.total_costs.buy_trading_fee == 0
        assert result.total_costs.fiat_withdrawal_fee == 0
        assert result.total_costs.crypto_transfer_cost == pytest.approx(0.0001 * 5_000_000)

    def test_net_profit_identity(self):
        """net_profit == gross_profit - total costs."""
        pairs = [
            ("bitFlyer", "Coincheck"),
            ("GMOコイン", "bitbank"),
            ("Zaif", "UnknownExchange"),
            ("BITPoint", "bitFlyer"),
        ]
        for buy, sell in pairs:
            result = calculate_arbitrage_costs(buy, sell, 0.37, 4_812_345.5, 4_901_234.25)
            assert result.net_profit == pytest.approx(
                result.gross_profit - result.total_costs.total, rel=1e-9
            )
            assert result.profit_reduction == pytest.approx(result.total_costs.total, rel=1e-9)

    def test_cost_breakdown_identifies_exchanges(self):
        result = calculate_arbitrage_costs("bitFlyer", "Coincheck", 1, 5_000_000, 5_100_000)

        assert result.cost_breakdown.buy_exchange.exchange == "bitFlyer"
        assert result.cost_breakdown.sell_exchange.exchange == "Coincheck"
        assert result.cost_breakdown.network_fee == 0.0001

    def test_losing_trade(self):
        """Selling below the buy price gives negative gross profit."""
        result = calculate_arbitrage_costs("bitFlyer", "Coincheck", 1, 5_100_000, 5_000_000)

        assert result.gross_profit == -100_000
        assert result.net_profit < -100_000

    def test_invalid_amount(self):
        with pytest.raises(InvalidArgumentError):
            calculate_arbitrage_costs("bitFlyer", "Coincheck", 0, 5_000_000, 5_100_000)
