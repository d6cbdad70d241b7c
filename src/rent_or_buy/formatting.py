from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def _round_half_up(value: float, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(value: float) -> str:
    """Whole-dollar currency with thousands separators, e.g. ``-$1,500``."""
    rounded = int(_round_half_up(value))
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}"


def format_short_currency(value: float) -> str:
    """Compact currency for axis labels: ``$2.3M``, ``$15K`` or ``$750``."""
    if value >= 1_000_000:
        return f"${_round_half_up(value / 1_000_000, 1)}M"
    if value >= 1_000:
        return f"${_round_half_up(value / 1_000)}K"
    return format_currency(value)


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
