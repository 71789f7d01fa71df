"""Helpers shared by the command modules."""

import sys
from datetime import date
from pathlib import Path

import pandas as pd
from rich.console import Console

from spendlog.dates import parse_record_date
from spendlog.domain.expenses import FilterCriteria
from spendlog.domain.models import CategoryId, MonthIndex, Year
from spendlog.store.schema import database_exists, get_db_path

console = Console()


def require_database() -> Path:
    """Return the database path, exiting if it has not been initialised."""
    db_path = get_db_path()
    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'spendlog init' first.[/red]", style="bold")
        sys.exit(1)
    return db_path


def parse_date_input(value: str) -> date:
    """Normalise a user-supplied date.

    Args:
        value: Date in YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY or similar.

    Returns:
        Calendar date.

    Raises:
        ValueError: If the value cannot be parsed as a date.
    """
    iso_date = parse_record_date(value)
    if iso_date is not None:
        return iso_date

    try:
        parsed = pd.to_datetime(value, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Invalid date '{value}'") from e
    if pd.isna(parsed):
        raise ValueError(f"Invalid date '{value}'")
    return parsed.date()


def parse_date_option(value: str | None) -> date | None:
    """Parse an optional date option, exiting with a message if invalid."""
    if not value:
        return None
    try:
        return parse_date_input(value)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)


def resolve_period(month: int | None, year: int | None, today: date | None = None) -> tuple[MonthIndex, Year]:
    """Resolve a 1-based month option and a year option to an engine period.

    Missing values default to the current month and year.

    Args:
        month: Month number 1-12, or None.
        year: Calendar year, or None.
        today: Reference date (defaults to today).

    Returns:
        Tuple of (0-based month index, year).
    """
    now = today or date.today()
    if month is not None and not 1 <= month <= 12:
        console.print(f"[red]Invalid month: {month} (expected 1-12)[/red]")
        sys.exit(1)

    month_index = MonthIndex((month if month is not None else now.month) - 1)
    return month_index, Year(year if year is not None else now.year)


def build_criteria(
    categories: list[str] | None,
    start: str | None,
    end: str | None,
    search: str | None,
) -> FilterCriteria:
    """Build filter criteria from command options."""
    return FilterCriteria(
        categories=frozenset(CategoryId(c) for c in categories or []),
        start_date=parse_date_option(start),
        end_date=parse_date_option(end),
        search_term=search,
    )
