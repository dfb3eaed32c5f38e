"""Pytest configuration and fixtures for price source tests."""

import os

import pytest
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "live: mark test as requiring live exchange API access"
    )


@pytest.fixture(autouse=True)
def _check_live_enabled(request):
    """Auto-skip live tests unless ARB_LIVE_TESTS is set."""
    if not any(m.name == "live" for m in request.node.iter_markers()):
        return

    if not os.getenv("ARB_LIVE_TESTS"):
        pytest.skip("ARB_LIVE_TESTS not set - skipping live exchange test")


@pytest.fixture
def ticker_payloads():
    """Sample public ticker responses keyed by exchange."""
    return {
        "bitFlyer": {
            "product_code": "BTC_JPY",
            "timestamp": "2024-01-01T00:00:00.000",
            "best_bid": 4_999_000.0,
            "best_ask": 5_001_000.0,
            "ltp": 5_000_000.0,
        },
        "Coincheck": {
            "last": 5_100_000.0,
            "bid": 5_099_000.0,
            "ask": 5_101_000.0,
            "timestamp": 1704067200,
        },
        "GMOコイン": {
            "status": 0,
            "data": [
                {"symbol": "BTC", "last": "5050000", "bid": "5049000", "ask": "5051000"},
            ],
        },
        "bitbank": {
            "success": 1,
            "data": {"last": "4990000", "buy": "4989000", "sell": "4991000"},
        },
    }
