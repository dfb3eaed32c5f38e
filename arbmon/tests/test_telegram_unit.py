"""Unit tests for TelegramNotifier (no live API connection required)."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from arbmon.models import ArbitrageOpportunity
from arbmon.utils.telegram import TelegramNotifier


def create_opportunity(exchange_to="Coincheck", profitable=True) -> ArbitrageOpportunity:
    return ArbitrageOpportunity(
        exchange_from="bitFlyer",
        exchange_to=exchange_to,
        price_from=5_000_000,
        price_to=5_100_000,
        price_difference=100_000,
        percentage_difference=2.0,
        gross_profit=100_000,
        net_profit=89_593 if profitable else -1_000,
        net_profit_percentage=1.79 if profitable else -0.02,
        total_fees=10_407,
        is_profitable_after_fees=profitable,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def notifier():
    notifier = TelegramNotifier(bot_token="token", chat_id="chat")
    notifier._http = MagicMock()
    notifier._http.post = AsyncMock(return_value=MagicMock(status_code=200))
    return notifier


class TestTelegramNotifier:
    """Test publishing opportunities."""

    @pytest.mark.asyncio
    async def test_not_configured(self, monkeypatch):
        monkeypatch.delenv("TG_BOT_TOKEN", raising=False)
        monkeypatch.delenv("TG_CHAT_ID", raising=False)
        notifier = TelegramNotifier()

        assert not notifier.is_configured
        assert await notifier.publish([create_opportunity()]) is False
        assert await notifier.send("hello") is False

    @pytest.mark.asyncio
    async def test_publish_profitable(self, notifier):
        assert await notifier.publish([create_opportunity()]) is True

        payload = notifier._http.post.call_args.kwargs["json"]
        assert payload["chat_id"] == "chat"
        assert "bitFlyer -&gt; Coincheck" in payload["text"]

    @pytest.mark.asyncio
    async def test_unprofitable_filtered(self, notifier):
        assert await notifier.publish([create_opportunity(profitable=False)]) is False
        notifier._http.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unprofitable_included_when_requested(self, notifier):
        notifier.only_profitable = False

        assert await notifier.publish([create_opportunity(profitable=False)]) is True

    @pytest.mark.asyncio
    async def test_api_error(self, notifier):
        notifier._http.post = AsyncMock(return_value=MagicMock(status_code=400, text="Bad"))

        assert await notifier.send("hello") is False

    @pytest.mark.asyncio
    async def test_network_error(self, notifier):
        notifier._http.post = AsyncMock(side_effect=httpx.ConnectError("refused"))

        assert await notifier.send("hello") is False

    def test_build_message_escapes_html(self):
        message = TelegramNotifier.build_message([create_opportunity(exchange_to="<b>X</b>")])

        assert "&lt;b&gt;X&lt;/b&gt;" in message
        assert message.startswith("<b>Arbitrage: 1 opportunities</b>")
