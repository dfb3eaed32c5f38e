"""Configuration classes for the arbitrage monitor."""

import math
import os
from dataclasses import dataclass, field


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DetectorConfig:
    """Policy applied by the arbitrage detector.

    Attributes:
        trade_amount: BTC quantity each opportunity is costed at
        only_profitable: Drop pairs whose net profit is not positive
        min_net_profit_percentage: Drop pairs below this net profit % (optional)
    """

    trade_amount: float = 1.0
    only_profitable: bool = False
    min_net_profit_percentage: float | None = None

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ValueError: If trade_amount is not positive or the threshold is not finite.
        """
        try:
            finite = math.isfinite(self.trade_amount)
        except (OverflowError, TypeError):
            finite = False
        if not finite or self.trade_amount <= 0:
            raise ValueError(f"trade_amount must be positive, got {self.trade_amount}")
        if self.min_net_profit_percentage is not None and not math.isfinite(
            self.min_net_profit_percentage
        ):
            raise ValueError("min_net_profit_percentage must be finite")


@dataclass
class LoggingConfig:
    """Logging settings for the runner."""

    level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "arbmon.log"


@dataclass
class MonitorConfig:
    """Configuration for the monitoring loop.

    Attributes:
        poll_interval: Seconds between price polls
        detector: Detector policy
        fee_file: Optional JSON fee table overriding the built-in schedules
        logging: Logging settings
        telegram_bot_token: Bot token for notifications (optional)
        telegram_chat_id: Chat ID for notifications (optional)
        history_size: Number of opportunities kept in the in-memory store
    """

    poll_interval: float = 5.0
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    fee_file: str = ""
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    history_size: int = 500

    @classmethod
    def from_env(cls) -> "MonitorConfig":
        """Load configuration from environment variables.

        Environment variables:
            ARB_POLL_INTERVAL: Seconds between polls (default 5)
            ARB_TRADE_AMOUNT: BTC per opportunity (default 1)
            ARB_ONLY_PROFITABLE: Only report pairs profitable after fees
            ARB_MIN_NET_PROFIT_PCT: Minimum net profit percentage
            ARB_FEE_FILE: Path to a JSON fee table
            ARB_HISTORY_SIZE: Opportunities kept in memory (default 500)
            LOG_LEVEL: Logging level (default INFO)
            LOG_TO_FILE: Also log to LOG_FILE
            LOG_FILE: Log file path (default arbmon.log)
            TG_BOT_TOKEN: Telegram bot token
            TG_CHAT_ID: Telegram chat ID
        """
        return cls(
            poll_interval=_env_float("ARB_POLL_INTERVAL", 5.0),
            detector=DetectorConfig(
                trade_amount=_env_float("ARB_TRADE_AMOUNT", 1.0),
                only_profitable=_env_bool("ARB_ONLY_PROFITABLE", False),
                min_net_profit_percentage=_env_float("ARB_MIN_NET_PROFIT_PCT", None),
            ),
            fee_file=os.getenv("ARB_FEE_FILE", ""),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                log_to_file=_env_bool("LOG_TO_FILE", False),
                log_file=os.getenv("LOG_FILE", "arbmon.log"),
            ),
            telegram_bot_token=os.getenv("TG_BOT_TOKEN", ""),
            telegram_chat_id=os.getenv("TG_CHAT_ID", ""),
            history_size=int(_env_float("ARB_HISTORY_SIZE", 500)),
        )

    def validate(self) -> list[str]:
        """Validate configuration.

        Returns:
            List of error messages, empty if valid.
        """
        errors = []
        if not math.isfinite(self.poll_interval) or self.poll_interval <= 0:
            errors.append(f"poll_interval must be positive, got {self.poll_interval}")
        if self.history_size <= 0:
            errors.append(f"history_size must be positive, got {self.history_size}")
        try:
            self.detector.validate()
        except ValueError as e:
            errors.append(str(e))
        if self.fee_file and not os.path.exists(self.fee_file):
            errors.append(f"Fee file not found: {self.fee_file}")
        if bool(self.telegram_bot_token) != bool(self.telegram_chat_id):
            errors.append("TG_BOT_TOKEN and TG_CHAT_ID must be set together")
        return errors
