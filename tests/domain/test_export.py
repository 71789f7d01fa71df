"""Tests for spendlog.domain.export pure functions."""

import csv
import io
from datetime import date

from spendlog.domain.export import (
    expenses_csv,
    export_filename,
    format_amount,
    yearly_summary_csv,
    yearly_summary_filename,
)
from spendlog.domain.expenses import ExpenseRecord
from spendlog.domain.models import Amount, CategoryId, MonthIndex, Year
from spendlog.domain.summary import MonthlyBucket, monthly_totals


def make_record(id: str, amount: object, date: str, description: str, category: str = "food") -> ExpenseRecord:
    return ExpenseRecord(id=id, amount=amount, category=CategoryId(category), description=description, date=date)


class TestExpensesCsv:
    """Tests for expenses_csv."""

    def test_header_and_rows(self) -> None:
        """Should write header, display date, category, quoted description and amount."""
        content = expenses_csv(
            [
                make_record("1", 150, "2024-03-05", "Coffee shop"),
                make_record("2", "12.5", "2024-03-06", "Bus ticket", "transport"),
            ]
        )

        lines = content.split("\n")
        assert lines[0] == "Date,Category,Description,Amount (₹)"
        assert lines[1] == '"Mar 05, 2024","food","Coffee shop",150'
        assert lines[2] == '"Mar 06, 2024","transport","Bus ticket",12.5'
        assert len(lines) == 3

    def test_commas_and_quotes_stay_in_one_field(self) -> None:
        """Should escape descriptions so the CSV parses back to four columns."""
        content = expenses_csv([make_record("1", 99, "2024-01-02", 'Dinner, "fancy"')])

        rows = list(csv.reader(io.StringIO(content)))

        assert rows[1] == ["Jan 02, 2024", "food", 'Dinner, "fancy"', "99"]

    def test_empty_records_only_header(self) -> None:
        """Should write just the header."""
        assert expenses_csv([]) == "Date,Category,Description,Amount (₹)"

    def test_malformed_amount_written_as_zero(self) -> None:
        """Should export malformed amounts as zero."""
        content = expenses_csv([make_record("1", "abc", "2024-01-02", "Mystery")])
        assert content.split("\n")[1].endswith(",0")


class TestYearlySummaryCsv:
    """Tests for yearly_summary_csv."""

    def test_twelve_rows(self) -> None:
        """Should write the header and one row per month."""
        records = [make_record("1", 300, "2024-03-10", "Rent"), make_record("2", 99.5, "2024-07-02", "Gift")]

        lines = yearly_summary_csv(monthly_totals(records, Year(2024))).split("\n")

        assert lines[0] == "Month,Total Expenses (₹),Number of Transactions"
        assert len(lines) == 13
        assert lines[1] == "Jan,0,0"
        assert lines[3] == "Mar,300,1"
        assert lines[7] == "Jul,99.5,1"

    def test_single_bucket(self) -> None:
        """Should format bucket fields."""
        bucket = MonthlyBucket(name="Feb", month=MonthIndex(1), total=Amount(1200.0), count=4)
        assert yearly_summary_csv([bucket]).split("\n")[1] == "Feb,1200,4"


class TestFormatAmount:
    """Tests for format_amount."""

    def test_integral_and_fractional(self) -> None:
        """Should drop .0 for whole amounts only."""
        assert format_amount(150.0) == "150"
        assert format_amount("12.50") == "12.5"
        assert format_amount("bad") == "0"


class TestFilenames:
    """Tests for export_filename and yearly_summary_filename."""

    def test_month_and_year(self) -> None:
        """Should zero-pad the month."""
        assert export_filename(month=3, year=Year(2024)) == "expenses_2024_03.csv"
        assert export_filename(month=12, year=Year(2024)) == "expenses_2024_12.csv"

    def test_year_only(self) -> None:
        """Should use just the year."""
        assert export_filename(year=Year(2023)) == "expenses_2023.csv"

    def test_month_without_year_uses_today(self) -> None:
        """Should ignore a month given without a year."""
        assert export_filename(month=3, today=date(2025, 6, 1)) == "expenses_2025-06-01.csv"

    def test_no_period(self) -> None:
        """Should fall back to today's ISO date."""
        assert export_filename(today=date(2024, 11, 9)) == "expenses_2024-11-09.csv"

    def test_date_range_takes_precedence(self) -> None:
        """Should use the date range when given."""
        name = export_filename(month=3, year=Year(2024), date_range=("2024-01-01", "2024-02-01"))
        assert name == "expenses_2024-01-01_to_2024-02-01.csv"

    def test_yearly_summary_filename(self) -> None:
        """Should include the year."""
        assert yearly_summary_filename(Year(2024)) == "yearly_summary_2024.csv"
