"""Export commands for writing expenses and yearly summaries to CSV."""

import sqlite3
import sys
from pathlib import Path

from rich.console import Console

from spendlog.commands.common import build_criteria, require_database, resolve_period
from spendlog.config import get_settings
from spendlog.domain.export import expenses_csv, export_filename, yearly_summary_csv, yearly_summary_filename
from spendlog.domain.expenses import filter_expenses, select_by_month, select_by_year, sort_expenses
from spendlog.domain.models import Year
from spendlog.domain.summary import monthly_totals
from spendlog.store.queries import load_records

console = Console()


def write_export(content: str, filename: str, output_dir: str | None) -> Path:
    """Write export content to a file.

    Args:
        content: CSV text.
        filename: File name.
        output_dir: Target directory. If None, uses the configured export directory.

    Returns:
        Path of the written file.

    Raises:
        OSError: If the file cannot be written.
    """
    directory = Path(output_dir).expanduser() if output_dir else get_settings().export_dir
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    # utf-8-sig so spreadsheet apps pick up the rupee sign
    path.write_text(content + "\n", encoding="utf-8-sig")
    return path


def export_command(
    month: int | None = None,
    year: int | None = None,
    all: bool = False,
    categories: list[str] | None = None,
    start: str | None = None,
    end: str | None = None,
    search: str | None = None,
    output_dir: str | None = None,
) -> None:
    """Export a month's filtered expenses to CSV.

    With `all`, exports every expense instead, or every expense of `year` when given.
    """
    db_path = require_database()

    try:
        records = load_records(db_path)

        if all and year is not None:
            to_export = sort_expenses(select_by_year(records, Year(year)), "date", "desc")
            filename = export_filename(year=Year(year))
        elif all:
            to_export = list(records)
            filename = export_filename()
        else:
            month_index, period_year = resolve_period(month, year)
            criteria = build_criteria(categories, start, end, search)
            selected = filter_expenses(select_by_month(records, month_index, period_year), criteria)
            to_export = sort_expenses(selected, "date", "desc")
            filename = export_filename(month_index + 1, period_year)

        if not to_export:
            console.print("[yellow]No expenses to export[/yellow]")
            return

        path = write_export(expenses_csv(to_export), filename, output_dir)
        console.print(f"[green]✓[/green] Exported {len(to_export)} expenses to: {path}")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)


def export_year_command(year: int | None = None, output_dir: str | None = None) -> None:
    """Export a year's monthly summary to CSV."""
    db_path = require_database()
    _, target_year = resolve_period(None, year)

    try:
        buckets = monthly_totals(load_records(db_path), Year(target_year))
        path = write_export(yearly_summary_csv(buckets), yearly_summary_filename(target_year), output_dir)
        console.print(f"[green]✓[/green] Yearly summary for {target_year} exported to: {path}")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)
