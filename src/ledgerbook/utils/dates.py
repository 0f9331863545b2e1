"""Calendar helpers anchored at local midnight.

Every date boundary used by reports and schedules goes through these
helpers, so naive local datetimes are the only representation of an instant.
"""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator, Union

from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime]


def to_day(value: DateLike) -> date:
    """Drop the time-of-day part of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(value: DateLike) -> datetime:
    """Return local midnight of the given day."""
    return datetime.combine(to_day(value), time.min)


def as_instant(value: DateLike) -> datetime:
    """Return datetimes unchanged and anchor bare dates at local midnight."""
    if isinstance(value, datetime):
        return value
    return start_of_day(value)


def end_of_day(value: DateLike) -> datetime:
    """Return the last representable instant of the given day."""
    return datetime.combine(to_day(value), time.max)


def at_hour(value: DateLike, hour: int) -> datetime:
    """Pin a day to a fixed local hour."""
    return datetime.combine(to_day(value), time(hour=hour))


def days_in_month(year: int, month: int) -> int:
    """Number of days in a calendar month, leap years included."""
    return calendar.monthrange(year, month)[1]


def add_months(base: date, months: int, desired_day: int) -> date:
    """Shift by whole months and land on ``desired_day``, clamped to month end.

    >>> add_months(date(2025, 1, 31), 1, 31)
    datetime.date(2025, 2, 28)
    """
    first = base.replace(day=1) + relativedelta(months=months)
    day = min(desired_day, days_in_month(first.year, first.month))
    return first.replace(day=day)


def sunday_based_weekday(value: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return (value.weekday() + 1) % 7


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    return value.replace(day=days_in_month(value.year, value.month))


def iter_months(start: date, end: date) -> Iterator[tuple[date, date]]:
    """Yield ``(first_day, last_day)`` of each calendar month touching the range.

    The first and last tuples are clipped to ``start`` and ``end``.
    """
    current = month_start(start)
    while current <= end:
        yield max(current, start), min(month_end(current), end)
        current = current + relativedelta(months=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each day in the inclusive range."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def span_in_days(start: date, end: date) -> int:
    """Number of whole days between two dates."""
    return (end - start).days


def format_display_date(value: date) -> str:
    """Human-readable date such as ``5 Jan 2025``."""
    return f"{value.day} {value.strftime('%b %Y')}"
