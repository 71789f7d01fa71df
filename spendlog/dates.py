"""Date utilities for spendlog.

Pure functions for calendar-date parsing and formatting. Expense dates are
calendar dates with no time-of-day, so everything here works on date
components rather than instants.
"""

from datetime import date, datetime, timedelta
from typing import Any

from spendlog.domain.models import MonthIndex, Year

MONTH_ABBREVIATIONS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def parse_record_date(value: Any) -> date | None:
    """Parse an ISO-8601 record date into a calendar date.

    Only the leading YYYY-MM-DD part is considered, so a full timestamp such
    as "2024-03-05T23:30:00Z" still lands on March 5th.

    Args:
        value: Stored date value.

    Returns:
        Calendar date, or None if the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def month_name(month_index: MonthIndex) -> str:
    """Get the full month name for a 0-based month index.

    Args:
        month_index: Month index (0 = January).

    Returns:
        Month name (e.g., "January").

    Raises:
        IndexError: If month_index is outside 0-11.
    """
    if not 0 <= month_index <= 11:
        raise IndexError(f"Month index out of range: {month_index}")
    return MONTH_NAMES[month_index]


def period_label(month_index: MonthIndex, year: Year) -> str:
    """Human-readable label for a month of a year (e.g., "March 2024")."""
    return f"{month_name(month_index)} {year}"


def format_display_date(value: Any) -> str:
    """Format a record date for display.

    Args:
        value: Stored date value.

    Returns:
        Date formatted as "Mar 05, 2024", or an empty string if unparseable.
    """
    parsed = parse_record_date(value)
    if parsed is None:
        return ""
    return f"{MONTH_ABBREVIATIONS[parsed.month - 1]} {parsed.day:02d}, {parsed.year}"


def recent_days(end: date, days: int = 7) -> list[date]:
    """List the calendar days ending at a given day.

    Args:
        end: Last day to include.
        days: Number of days.

    Returns:
        Dates ordered oldest first, with `end` last.
    """
    return [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
