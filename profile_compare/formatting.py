"""Display formatting helpers shared by the comparison tables."""
from __future__ import annotations

from .models import SECONDS_PER_HOUR, check_offset


def format_hhmm(seconds_from_midnight: int) -> str:
    """Format an offset from midnight as ``HH:MM``."""

    hours, remainder = divmod(int(check_offset(seconds_from_midnight)), SECONDS_PER_HOUR)
    return f"{hours:02d}:{remainder // 60:02d}"


def format_decimal(value: float, places: int) -> str:
    """Fixed-point formatting; rounds half to even on the exact float value."""

    text = f"{value:.{places}f}"
    # no negative zero
    if text.startswith("-") and float(text) == 0:
        text = text[1:]
    return text


def format_range(low: float, high: float, places: int) -> str:
    return f"{format_decimal(low, places)} - {format_decimal(high, places)}"
