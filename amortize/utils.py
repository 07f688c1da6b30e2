"""Utility functions for the amortization engine.

This module provides helpers for parsing user input into Python data types and
for calendar arithmetic on schedule boundaries: adding months and years,
snapping a timestamp to the start or the last second of its day, and rounding
decimals to a fixed number of places. It uses Python's ``calendar`` module to
clamp days at the end of shorter months.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
import calendar
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[int, str, Decimal]


def to_decimal(value: Union[Number, float]) -> Decimal:
    """Coerce ``value`` into a ``Decimal`` without binary float artifacts.

    Floats go through ``str`` first so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its exact binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_places(value: Decimal, places: int) -> Decimal:
    """Round ``value`` half away from zero to ``places`` decimal places."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def parse_date(value: str) -> datetime:
    """Parse an ISO-8601 date or timestamp into a ``datetime``.

    Parameters
    ----------
    value: str
        A string such as ``"2020-04-15"`` or ``"2020-04-15T10:30:00+05:30"``.

    Returns
    -------
    datetime
        The parsed timestamp. Plain dates are placed at midnight.

    Raises
    ------
    ValueError
        If the string is not a valid ISO-8601 date.
    """
    try:
        return as_datetime(datetime.fromisoformat(value.strip()))
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def as_datetime(value: Union[date, datetime]) -> datetime:
    """Return ``value`` as a ``datetime``, placing plain dates at midnight."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def start_of_day(dt: datetime) -> datetime:
    """Strip the time of day from ``dt``, keeping its timezone."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """Return the last whole second (23:59:59) of the day of ``dt``."""
    return dt.replace(hour=23, minute=59, second=59, microsecond=0)


def add_days(dt: datetime, days: int) -> datetime:
    return dt + timedelta(days=days)


def add_months(dt: datetime, months: int) -> datetime:
    """Return a new timestamp a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29). The time of day and the
    timezone are kept.
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def add_years(dt: datetime, years: int) -> datetime:
    """Return a new timestamp a number of years after ``dt``.

    Feb 29 moves to Feb 28 in non-leap years.
    """
    return add_months(dt, 12 * years)


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and underscores and handles both integer
    and float-like strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "").replace("_", "").strip()
        return Decimal(cleaned)
    except (AttributeError, InvalidOperation) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000). A leading minus sign is kept.
    """
    value = value.strip().lower()
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    return decimal_from_str(value) * factor
