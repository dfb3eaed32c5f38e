"""Telegram notification of arbitrage opportunities."""

import html
import os
from typing import Sequence

import httpx

from ..engine.formatter import format_opportunity_message
from ..logging import get_logger
from ..models import ArbitrageOpportunity

logger = get_logger("telegram")


class TelegramNotifier:
    """Send opportunity alerts via Telegram Bot API."""

    API_URL = "https://api.telegram.org"

    def __init__(
        self,
        bot_token: str | None = None,
        chat_id: str | None = None,
        only_profitable: bool = True,
    ):
        """Initialize Telegram notifier.

        Args:
            bot_token: Bot token from @BotFather. Defaults to TG_BOT_TOKEN env var.
            chat_id: Chat/channel ID to send messages. Defaults to TG_CHAT_ID env var.
            only_profitable: Only publish opportunities profitable after fees.
        """
        self.bot_token = bot_token or os.getenv("TG_BOT_TOKEN", "")
        self.chat_id = chat_id or os.getenv("TG_CHAT_ID", "")
        self.only_profitable = only_profitable
        self._http: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        """Check if bot token and chat ID are configured."""
        return bool(self.bot_token and self.chat_id)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=10)
        return self._http

    async def send(self, message: str, parse_mode: str = "HTML") -> bool:
        """Send a message to the configured chat.

        Args:
            message: Message text (supports HTML formatting)
            parse_mode: "HTML" or "Markdown"

        Returns:
            True if sent successfully
        """
        if not self.is_configured:
            logger.warning("Telegram not configured, skipping notification")
            return False

        try:
            client = await self._get_client()
            url = f"{self.API_URL}/bot{self.bot_token}/sendMessage"
            resp = await client.post(
                url,
                json={
                    "chat_id": self.chat_id,
                    "text": message,
                    "parse_mode": parse_mode,
                },
            )

            if resp.status_code == 200:
                logger.debug("Telegram message sent")
                return True
            else:
                logger.error(f"Telegram API error: {resp.status_code} {resp.text}")
                return False

        except httpx.HTTPError as e:
            logger.error(f"Failed to send Telegram message: {e}")
            return False

    @staticmethod
    def build_message(opportunities: Sequence[ArbitrageOpportunity]) -> str:
        """HTML alert listing the given opportunities, best first."""
        lines = [f"<b>Arbitrage: {len(opportunities)} opportunities</b>"]
        for opp in opportunities:
            lines.append(html.escape(format_opportunity_message(opp)))
        return "\n".join(lines)

    async def publish(self, opportunities: Sequence[ArbitrageOpportunity]) -> bool:
        """Publish one cycle's opportunities.

        Returns:
            True if a message was sent, False if nothing qualified or sending failed.
        """
        selected = [
            o for o in opportunities
            if o.is_profitable_after_fees or not self.only_profitable
        ]
        if not selected or not self.is_configured:
            return False
        return await self.send(self.build_message(selected))

    async def close(self):
        """Close HTTP client."""
        if self._http:
            await self._http.aclose()
            self._http = None
