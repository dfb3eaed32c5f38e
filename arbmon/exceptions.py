"""Custom exceptions for the arbitrage monitor."""


class ArbitrageError(Exception):
    """Base exception for all arbitrage monitor errors."""
    pass


class InvalidQuoteError(ArbitrageError):
    """A price quote failed numeric or range validation."""

    def __init__(self, exchange: str, reason: str):
        self.exchange = exchange
        self.reason = reason
        super().__init__(f"Invalid quote from {exchange or '<unknown>'}: {reason}")


class NonFiniteResultError(ArbitrageError):
    """A cost or price difference computation produced NaN or infinity."""

    def __init__(self, field: str, value: float):
        self.field = field
        self.value = value
        super().__init__(f"Non-finite result for {field}: {value}")


class InvalidArgumentError(ArbitrageError, ValueError):
    """Calculator or advisor called with an out-of-range argument."""

    def __init__(self, name: str, value, expected: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}: {value!r} (expected {expected})")


class ClientError(ArbitrageError):
    """Base exception for price source client errors."""
    pass


class NotConnectedError(ClientError):
    """Operation attempted before calling connect()."""
    pass


class PriceFetchError(ClientError):
    """Failed to fetch or parse a ticker from an exchange."""

    def __init__(self, exchange: str, reason: str):
        self.exchange = exchange
        self.reason = reason
        super().__init__(f"Failed to fetch price from {exchange}: {reason}")
