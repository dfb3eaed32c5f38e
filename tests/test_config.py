"""Tests for configuration loading and validation."""

import pytest

from arbmon.config import DetectorConfig, MonitorConfig

ENV_VARS = [
    "ARB_POLL_INTERVAL",
    "ARB_TRADE_AMOUNT",
    "ARB_ONLY_PROFITABLE",
    "ARB_MIN_NET_PROFIT_PCT",
    "ARB_FEE_FILE",
    "ARB_HISTORY_SIZE",
    "LOG_LEVEL",
    "LOG_TO_FILE",
    "LOG_FILE",
    "TG_BOT_TOKEN",
    "TG_CHAT_ID",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestMonitorConfigFromEnv:
    """Test loading configuration from environment variables."""

    def test_defaults(self, clean_env):
        config = MonitorConfig.from_env()

        assert config.poll_interval == 5.0
        assert config.detector == DetectorConfig()
        assert config.fee_file == ""
        assert config.logging.level == "INFO"
        assert config.logging.log_to_file is False
        assert config.validate() == []

    def test_overrides(self, clean_env):
        clean_env.setenv("ARB_POLL_INTERVAL", "10")
        clean_env.setenv("ARB_TRADE_AMOUNT", "0.5")
        clean_env.setenv("ARB_ONLY_PROFITABLE", "true")
        clean_env.setenv("ARB_MIN_NET_PROFIT_PCT", "0.25")
        clean_env.setenv("LOG_LEVEL", "DEBUG")
        clean_env.setenv("LOG_TO_FILE", "1")

        config = MonitorConfig.from_env()

        assert config.poll_interval == 10.0
        assert config.detector.trade_amount == 0.5
        assert config.detector.only_profitable is True
        assert config.detector.min_net_profit_percentage == 0.25
        assert config.logging.level == "DEBUG"
        assert config.logging.log_to_file is True

    def test_non_numeric_value(self, clean_env):
        clean_env.setenv("ARB_TRADE_AMOUNT", "lots")

        with pytest.raises(ValueError, match="ARB_TRADE_AMOUNT"):
            MonitorConfig.from_env()


class TestValidate:
    """Test configuration validation."""

    def test_bad_poll_interval(self):
        errors = MonitorConfig(poll_interval=0).validate()

        assert any("poll_interval" in e for e in errors)

    def test_bad_trade_amount(self):
        errors = MonitorConfig(detector=DetectorConfig(trade_amount=-1)).validate()

        assert any("trade_amount" in e for e in errors)

    def test_missing_fee_file(self, tmp_path):
        errors = MonitorConfig(fee_file=str(tmp_path / "none.json")).validate()

        assert any("Fee file not found" in e for e in errors)

    def test_half_configured_telegram(self):
        errors = MonitorConfig(telegram_bot_token="token").validate()

        assert any("TG_CHAT_ID" in e for e in errors)

    def test_detector_threshold_must_be_finite(self):
        with pytest.raises(ValueError, match="min_net_profit_percentage"):
            DetectorConfig(min_net_profit_percentage=float("nan")).validate()
