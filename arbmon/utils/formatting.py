"""Number and time formatting helpers."""

import math
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext

# Japan Standard Time has no DST
JST = timezone(timedelta(hours=9), name="JST")


def get_japan_time(now: datetime | None = None) -> str:
    """Current time in Japan as ``YYYY-MM-DDTHH:MM:SS``."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(JST).strftime("%Y-%m-%dT%H:%M:%S")


def format_jpy(amount: float) -> str:
    """Format a yen amount rounded half-up to whole yen, e.g. ``￥1,000``."""
    value = Decimal(str(abs(amount)))
    with localcontext() as ctx:
        # quantize needs room for every integer digit
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        rounded = int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if amount < 0 and rounded != 0 else ""
    return f"{sign}￥{rounded:,}"


def calculate_percentage_difference(a: float, b: float) -> float:
    """Symmetric percentage difference of two values relative to their mean.

    Returns 0 when either value is zero.
    """
    if a == 0 or b == 0:
        return 0.0
    mean = abs((a + b) / 2)
    if mean == 0:
        return 0.0
    return abs(a - b) / mean * 100


def format_percentage(value: float, digits: int = 2) -> str:
    """Format a percentage value, ``n/a`` if not finite."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "n/a"
    try:
        value = float(value)
    except OverflowError:
        return "n/a"
    if not math.isfinite(value):
        return "n/a"
    return f"{value:.{digits}f}%"
