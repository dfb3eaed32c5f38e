"""Main entry point for the arbitrage monitor."""

import asyncio
import signal
import sys

from dotenv import load_dotenv

from .clients.feed import PriceFeed
from .config import MonitorConfig
from .engine.arbitrage import ArbitrageDetector
from .fees import DEFAULT_FEE_TABLE, load_fee_table
from .logging import set_log_level
from .models import ArbitrageOpportunity
from .store import BaseOpportunityStore, InMemoryOpportunityStore
from .utils.formatting import get_japan_time
from .utils.logger import LogContext, get_logger, setup_logger
from .utils.telegram import TelegramNotifier

# Component loggers that follow LOG_LEVEL
COMPONENT_LOGGERS = ("arb-engine", "price-feed", "telegram")


class MonitorRunner:
    """Polls exchange prices and reports arbitrage opportunities."""

    def __init__(
        self,
        config: MonitorConfig | None = None,
        feed: PriceFeed | None = None,
        store: BaseOpportunityStore | None = None,
        notifier: TelegramNotifier | None = None,
    ):
        self.config = config
        self.running = False

        # Components (initialized in setup unless injected)
        self.logger = None
        self.feed = feed
        self.store = store
        self.notifier = notifier
        self.detector = None

        self.current_prices = []
        self.current_opportunities: list[ArbitrageOpportunity] = []
        self.last_update: str | None = None

    def setup(self) -> bool:
        """Initialize all components."""
        if self.config is None:
            try:
                self.config = MonitorConfig.from_env()
            except (ValueError, OverflowError) as e:
                self.logger = setup_logger()
                self.logger.error(f"Config error: {e}")
                self.logger.error("Please fix configuration errors before running")
                return False

        self.logger = setup_logger(
            level=self.config.logging.level,
            log_to_file=self.config.logging.log_to_file,
            log_file=self.config.logging.log_file,
        )
        for name in COMPONENT_LOGGERS:
            set_log_level(name, self.logger.level)

        self.logger.info("=" * 60)
        self.logger.info("BTC/JPY Cross-Exchange Arbitrage Monitor")
        self.logger.info("=" * 60)

        errors = self.config.validate()
        if errors:
            for err in errors:
                self.logger.error(f"Config error: {err}")
            self.logger.error("Please fix configuration errors before running")
            return False

        fees = load_fee_table(self.config.fee_file) if self.config.fee_file else DEFAULT_FEE_TABLE
        self.detector = ArbitrageDetector(fees, self.config.detector)

        if self.feed is None:
            self.feed = PriceFeed.from_endpoints()
        if self.store is None:
            self.store = InMemoryOpportunityStore(self.config.history_size)
        if self.notifier is None:
            self.notifier = TelegramNotifier(
                self.config.telegram_bot_token or None,
                self.config.telegram_chat_id or None,
            )

        self.logger.info(f"Exchanges: {len(self.feed.sources)}")
        self.logger.info(f"Poll interval: {self.config.poll_interval}s")
        self.logger.info("Setup complete")
        return True

    async def run_cycle(self) -> list[ArbitrageOpportunity]:
        """Fetch one snapshot, detect, store and publish."""
        with LogContext("price cycle", self.logger):
            prices = await self.feed.get_snapshot()
            if not prices:
                self.logger.warning("No prices received this cycle")
                return []

            self.current_prices = prices
            await self.store.save_prices(prices)

            opportunities = self.detector.detect(prices)
            self.current_opportunities = opportunities
            self.last_update = get_japan_time()

            if opportunities:
                self.logger.info(f"Found {len(opportunities)} arbitrage opportunities:")
                for opp in opportunities:
                    self.logger.info(self.detector.format_opportunity_message(opp))
                await self.store.save_opportunities(opportunities)
                await self.notifier.publish(opportunities)

            return opportunities

    async def run_loop(self) -> None:
        """Main polling loop."""
        self.logger.info("Starting price monitoring loop...")
        poll_interval = self.config.poll_interval

        while self.running:
            try:
                await self.run_cycle()
                await asyncio.sleep(poll_interval)

            except asyncio.CancelledError:
                break
            except Exception as e:
                self.logger.error(f"Error in price fetching cycle: {e}", exc_info=True)
                await asyncio.sleep(poll_interval)

    async def shutdown(self) -> None:
        """Close network clients."""
        if self.feed is not None:
            await self.feed.close()
        if self.notifier is not None:
            await self.notifier.close()
        self.logger.info("Shutdown complete")

    async def run(self) -> None:
        """Run the monitor until interrupted."""
        if not self.setup():
            return

        await self.feed.connect()
        self.running = True

        def signal_handler(sig, frame):
            self.logger.info("Received shutdown signal")
            self.running = False

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        try:
            await self.run_loop()
        finally:
            await self.shutdown()


def main():
    """Entry point."""
    load_dotenv()

    runner = MonitorRunner()
    try:
        asyncio.run(runner.run())
    except KeyboardInterrupt:
        get_logger().info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
