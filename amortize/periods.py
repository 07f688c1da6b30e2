"""Period scheduler.

Splits an inclusive date range into whole periods of a given frequency and
produces the matching start and end boundaries of every period. Counting is
done on midnight-normalized dates; the caller's start instant is kept as the
start of the first period. Every period ends at 23:59:59 on the day before
the next period starts.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Union

from .data_models import Frequency, PeriodSchedule
from .errors import UnevenEndDateError
from .utils import add_days, add_months, add_years, as_datetime, end_of_day, start_of_day


def advance(dt: datetime, frequency: Frequency, count: int) -> datetime:
    """Move ``dt`` forward by ``count`` periods of ``frequency``."""
    if frequency is Frequency.DAILY:
        return add_days(dt, count)
    if frequency is Frequency.WEEKLY:
        return add_days(dt, 7 * count)
    if frequency is Frequency.MONTHLY:
        return add_months(dt, count)
    return add_years(dt, count)


def _count_calendar_periods(start: datetime, end: datetime, frequency: Frequency) -> int:
    count = 0
    current = start
    while current < end:
        count += 1
        current = advance(start, frequency, count)
    if add_days(current, -1) != end:
        raise UnevenEndDateError(start, end, frequency)
    return count


def get_period_difference(
    start_date: datetime, end_date: datetime, frequency: Union[Frequency, str]
) -> int:
    """Return the number of whole periods between two inclusive dates.

    Raises
    ------
    InvalidFrequencyError
        If ``frequency`` is not a known frequency.
    UnevenEndDateError
        If the range does not end exactly at the end of a period.
    """
    frequency = Frequency.coerce(frequency)
    start = start_of_day(as_datetime(start_date))
    end = start_of_day(as_datetime(end_date))
    if end < start:
        raise UnevenEndDateError(start, end, frequency)
    days = (end - start).days + 1
    if frequency is Frequency.DAILY:
        return days
    if frequency is Frequency.WEEKLY:
        if days % 7 != 0:
            raise UnevenEndDateError(start, end, frequency)
        return days // 7
    return _count_calendar_periods(start, end, frequency)


def period_start_dates(start_date: datetime, frequency: Frequency, period_count: int) -> List[datetime]:
    start_date = as_datetime(start_date)
    start = start_of_day(start_date)
    dates = [advance(start, frequency, i) for i in range(period_count)]
    if dates:
        dates[0] = start_date
    return dates


def period_end_dates(start_date: datetime, frequency: Frequency, period_count: int) -> List[datetime]:
    start = start_of_day(as_datetime(start_date))
    return [
        end_of_day(add_days(advance(start, frequency, i + 1), -1))
        for i in range(period_count)
    ]


def build_period_schedule(
    start_date: datetime, end_date: datetime, frequency: Union[Frequency, str]
) -> PeriodSchedule:
    """Derive the period count and boundaries for a date range."""
    frequency = Frequency.coerce(frequency)
    count = get_period_difference(start_date, end_date, frequency)
    return PeriodSchedule(
        frequency=frequency,
        period_count=count,
        start_dates=tuple(period_start_dates(start_date, frequency, count)),
        end_dates=tuple(period_end_dates(start_date, frequency, count)),
    )
