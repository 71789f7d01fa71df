"""Pure functions for CSV export formatting.

This module builds export file contents and names; writing them to disk is
left to the export command.
"""

import csv
import io
from datetime import date
from typing import Any, Iterable

from spendlog.dates import format_display_date
from spendlog.domain.expenses import ExpenseRecord, parse_amount
from spendlog.domain.models import Year
from spendlog.domain.summary import MonthlyBucket

EXPENSE_HEADERS = ["Date", "Category", "Description", "Amount (₹)"]

SUMMARY_HEADERS = ["Month", "Total Expenses (₹)", "Number of Transactions"]


def _csv_number(value: Any) -> int | float:
    number = parse_amount(value)
    return int(number) if number.is_integer() else number


def format_amount(value: Any) -> str:
    """Format an amount for CSV output.

    Args:
        value: Amount (number or numeric string).

    Returns:
        Integral amounts without decimals ("150"), others as-is ("12.5").
    """
    return str(_csv_number(value))


def expenses_csv(records: Iterable[ExpenseRecord]) -> str:
    """Render expense records as CSV.

    Columns are display date, category id, quoted description and amount.

    Args:
        records: Records in the order they should appear.

    Returns:
        CSV text with a header line, lines separated by "\\n".
    """
    buffer = io.StringIO()
    header_writer = csv.writer(buffer, lineterminator="\n")
    # Non-numeric fields are always quoted, so descriptions can hold commas
    row_writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")

    header_writer.writerow(EXPENSE_HEADERS)
    for record in records:
        row_writer.writerow(
            [
                format_display_date(record.date),
                str(record.category),
                str(record.description),
                _csv_number(record.amount),
            ]
        )

    return buffer.getvalue().rstrip("\n")


def yearly_summary_csv(buckets: Iterable[MonthlyBucket]) -> str:
    """Render monthly buckets as CSV.

    Args:
        buckets: Monthly buckets, normally the 12 months of one year.

    Returns:
        CSV text with a header line, lines separated by "\\n".
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(SUMMARY_HEADERS)
    for bucket in buckets:
        writer.writerow([bucket.name, format_amount(bucket.total), bucket.count])
    return buffer.getvalue().rstrip("\n")


def export_filename(
    month: int | None = None,
    year: Year | None = None,
    today: date | None = None,
    date_range: tuple[str, str] | None = None,
) -> str:
    """Generate a filename for an expense export.

    Args:
        month: 1-based month, only used together with year.
        year: Calendar year.
        today: Date used when no period is given (defaults to today).
        date_range: Optional (start, end) ISO dates; takes precedence.

    Returns:
        Filename such as "expenses_2024_03.csv".
    """
    if date_range:
        start, end = date_range
        return f"expenses_{start}_to_{end}.csv"

    if month and year:
        return f"expenses_{year}_{month:02d}.csv"

    if year:
        return f"expenses_{year}.csv"

    timestamp = (today or date.today()).isoformat()
    return f"expenses_{timestamp}.csv"


def yearly_summary_filename(year: Year) -> str:
    """Generate a filename for a yearly summary export."""
    return f"yearly_summary_{year}.csv"
