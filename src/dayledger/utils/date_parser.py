"""Date parsing utilities."""

import calendar
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-03-15", "March 15, 2024") and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse a "YYYY-MM" string into (year, month).

    Raises:
        ValueError: If the string is not a valid year and month
    """
    parts = month_str.strip().split("-")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid month '{month_str}'. Expected YYYY-MM")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month '{month_str}'. Month must be 01-12")
    return year, month


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    days_in_month = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days_in_month)


def last_n_days(days: int, today: date | None = None) -> tuple[date, date]:
    """Return the inclusive range of the ``days`` days ending on ``today``."""
    if today is None:
        today = date.today()
    return today - timedelta(days=days - 1), today


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a named reporting period.

    Args:
        period: One of this-month, last-month, last-7-days, last-30-days

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "this-month":
        return month_range(today.year, today.month)
    elif period == "last-month":
        previous = today - relativedelta(months=1)
        return month_range(previous.year, previous.month)
    elif period == "last-7-days":
        return last_n_days(7, today)
    elif period == "last-30-days":
        return last_n_days(30, today)
    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: "
            "this-month, last-month, last-7-days, last-30-days"
        )
