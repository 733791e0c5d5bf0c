"""Formatting helpers that render numbers with their semantic unit.

All helpers are total: NaN and infinities produced upstream by empty
samples render as "nan"/"inf" instead of raising.
"""

import math

from insightspy.core.models import TimeUnit, Unit

# Rates and durations are always rendered with this many decimals
TIME_PRECISION = 2


def _number(value: float, precision: int) -> str:
    return f"{float(value):.{precision}f}"


def _integer(value: float) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return str(int(value))


def format_value(unit: Unit, value: float) -> str:
    """Format a scalar value, e.g. 42.0 with Unit.PERCENT -> "42%".

    Args:
        unit: Unit supplying precision and suffix.
        value: Value to format.

    Returns:
        Value with the unit's precision followed by its symbol.
    """
    return f"{_number(value, unit.precision)}{unit.symbol}"


def format_count(unit: Unit, count: float) -> str:
    """Format an integer count, e.g. 3 with Unit.ITEMS -> "3"."""
    return f"{_integer(count)}{unit.symbol}"


def format_rate(unit: Unit, rate: float, time_unit: TimeUnit) -> str:
    """Format a per-time-unit rate, e.g. "1.50 Errors/s".

    Args:
        unit: Unit of the counted events.
        rate: Events per ``time_unit``.
        time_unit: Time unit of the rate.

    Returns:
        Formatted rate string.
    """
    per = f"{unit.name}/{time_unit.abbreviation}" if unit.name else f"/{time_unit.abbreviation}"
    return f"{_number(rate, TIME_PRECISION)} {per}"


def format_duration(unit: Unit, duration: float, time_unit: TimeUnit | None) -> str:
    """Format an elapsed time, e.g. "132.40 ms".

    Falls back to the unit name when no time unit is given.
    """
    suffix = time_unit.abbreviation if time_unit is not None else unit.name
    text = _number(duration, TIME_PRECISION)
    return f"{text} {suffix}" if suffix else text
