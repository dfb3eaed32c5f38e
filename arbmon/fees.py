"""Per-exchange fee schedules.

Fee data is static configuration. A ``FeeTable`` is immutable and is passed
explicitly into the calculator, spread advisor and detector, so alternate
schedules can be used without touching shared state.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .logging import engine_logger as logger
from .models import CurrencyKind

# Fixed network transfer fee, applied as a fraction of trade value
NETWORK_FEE = 0.0001

# Currency aliases accepted by get_withdrawal_fee
_CURRENCY_ALIASES = {
    "fiat": CurrencyKind.FIAT,
    "jpy": CurrencyKind.FIAT,
    "crypto": CurrencyKind.CRYPTO,
    "btc": CurrencyKind.CRYPTO,
}


@dataclass(frozen=True)
class TradingFee:
    """Maker/taker rates as fractions. Maker may be negative (rebate)."""
    maker: float
    taker: float


@dataclass(frozen=True)
class WithdrawalFee:
    """Fixed withdrawal fees: fiat in JPY, crypto in BTC."""
    fiat: float
    crypto: float


@dataclass(frozen=True)
class FeeSchedule:
    """Fee schedule for one exchange."""
    trading_fee: TradingFee
    withdrawal_fee: WithdrawalFee

    @classmethod
    def from_dict(cls, data: Mapping) -> "FeeSchedule":
        """Build from ``{"tradingFee": {...}, "withdrawalFee": {...}}``.

        Snake-case keys and jpy/btc withdrawal keys are accepted as well.
        """
        trading = data.get("tradingFee", data.get("trading_fee", {}))
        withdrawal = data.get("withdrawalFee", data.get("withdrawal_fee", {}))
        return cls(
            trading_fee=TradingFee(
                maker=float(trading["maker"]),
                taker=float(trading["taker"]),
            ),
            withdrawal_fee=WithdrawalFee(
                fiat=float(withdrawal.get("fiat", withdrawal.get("jpy", 0))),
                crypto=float(withdrawal.get("crypto", withdrawal.get("btc", 0))),
            ),
        )


DEFAULT_FEE_SCHEDULE = FeeSchedule(
    trading_fee=TradingFee(maker=0.001, taker=0.001),
    withdrawal_fee=WithdrawalFee(fiat=500, crypto=0.0005),
)


def _schedule(maker: float, taker: float, fiat: float, crypto: float) -> FeeSchedule:
    return FeeSchedule(TradingFee(maker, taker), WithdrawalFee(fiat, crypto))


EXCHANGE_FEES: Mapping[str, FeeSchedule] = MappingProxyType({
    "bitFlyer": _schedule(0.0001, 0.0015, 550, 0.0004),
    "Coincheck": _schedule(0.0, 0.0, 407, 0.0005),
    "Zaif": _schedule(0.0, 0.001, 385, 0.0001),
    "GMOコイン": _schedule(-0.0001, 0.0005, 0, 0),
    "bitbank": _schedule(-0.0002, 0.0012, 550, 0.0006),
    "BITPoint": _schedule(0.0, 0.0, 0, 0),
})


@dataclass(frozen=True)
class FeeTable:
    """Immutable lookup of fee schedules by exchange name."""
    schedules: Mapping[str, FeeSchedule] = field(default_factory=lambda: EXCHANGE_FEES)
    default: FeeSchedule = DEFAULT_FEE_SCHEDULE
    network_fee: float = NETWORK_FEE

    def __post_init__(self):
        # Freeze a caller-supplied dict
        if not isinstance(self.schedules, MappingProxyType):
            object.__setattr__(
                self, "schedules", MappingProxyType(dict(self.schedules))
            )

    @classmethod
    def from_dict(cls, data: Mapping) -> "FeeTable":
        """Build a table from ``{"exchanges": {...}, "default": {...}, "networkFee": x}``."""
        schedules = {
            name: FeeSchedule.from_dict(entry)
            for name, entry in data.get("exchanges", {}).items()
        }
        default = (
            FeeSchedule.from_dict(data["default"])
            if "default" in data
            else DEFAULT_FEE_SCHEDULE
        )
        network_fee = float(data.get("networkFee", data.get("network_fee", NETWORK_FEE)))
        return cls(schedules=schedules, default=default, network_fee=network_fee)

    @property
    def exchanges(self) -> list[str]:
        """Exchanges with an explicit schedule."""
        return list(self.schedules)

    def schedule_for(self, exchange: str) -> FeeSchedule:
        """Schedule for an exchange, falling back to the default."""
        schedule = self.schedules.get(exchange)
        if schedule is None:
            logger.debug(f"No fee schedule for {exchange}, using default")
            return self.default
        return schedule

    def with_schedule(self, exchange: str, schedule: FeeSchedule) -> "FeeTable":
        """Return a copy with one exchange's schedule replaced or added."""
        schedules = dict(self.schedules)
        schedules[exchange] = schedule
        return FeeTable(schedules=schedules, default=self.default, network_fee=self.network_fee)


DEFAULT_FEE_TABLE = FeeTable()


def load_fee_table(path: str | Path) -> FeeTable:
    """Load a fee table from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or misses required rates.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid fee file {path}: {e}") from e

    try:
        table = FeeTable.from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid fee file {path}: missing {e}") from e

    logger.info(f"Loaded fee schedules for {len(table.schedules)} exchanges from {path}")
    return table


def get_trading_fee(exchange: str, fees: FeeTable = DEFAULT_FEE_TABLE) -> TradingFee:
    """Maker/taker rates for an exchange (default schedule if unknown)."""
    return fees.schedule_for(exchange).trading_fee


def get_withdrawal_fee(
    exchange: str,
    currency: CurrencyKind | str = CurrencyKind.FIAT,
    fees: FeeTable = DEFAULT_FEE_TABLE,
) -> float:
    """Withdrawal fee for an exchange in the given currency kind.

    Unknown currency kinds return 0.
    """
    key = currency.value if isinstance(currency, CurrencyKind) else str(currency).lower()
    kind = _CURRENCY_ALIASES.get(key)
    if kind is None:
        return 0

    withdrawal = fees.schedule_for(exchange).withdrawal_fee
    if kind is CurrencyKind.FIAT:
        return withdrawal.fiat
    return withdrawal.crypto
