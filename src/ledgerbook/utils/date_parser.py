"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from ledgerbook.utils.dates import month_end, start_of_day

SUPPORTED_PERIODS = (
    "this-month",
    "this-year",
    "this-week",
    "last-month",
    "last-year",
    "last-week",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative forms "today", "yesterday", "tomorrow", "last/this/next month",
    "last/this/next year" and "last/this/next week" (weeks start on Monday).

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    simple = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in simple:
        return simple[text]

    for prefix, offset in (("last ", -1), ("this ", 0), ("next ", 1)):
        if not text.startswith(prefix):
            continue
        period = text[len(prefix):]
        if period == "month":
            return today.replace(day=1) + relativedelta(months=offset)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=offset)
        if period == "week":
            monday = today - timedelta(days=today.weekday())
            return monday + timedelta(weeks=offset)

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(value: str) -> datetime:
    """Parse a date or date-time string into a naive local datetime.

    Relative words resolve to local midnight of the day they name.
    """
    text = value.strip()
    # No clock component: treat as a plain day
    if ":" not in text:
        return start_of_day(parse_date(text))
    try:
        parsed = date_parser.parse(text)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")
    return parsed.replace(tzinfo=None)


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "this-*" periods end today; "last-*" periods cover the full previous
    month, year or Monday-to-Sunday week.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()
    monday = today - timedelta(days=today.weekday())

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "this-week":
        return monday, today
    if period == "last-month":
        start = today.replace(day=1) - relativedelta(months=1)
        return start, month_end(start)
    if period == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)
    if period == "last-week":
        start = monday - timedelta(days=7)
        return start, start + timedelta(days=6)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(SUPPORTED_PERIODS)}"
    )
