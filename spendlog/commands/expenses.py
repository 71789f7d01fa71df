"""Expense management commands (add, delete, list)."""

import math
import sqlite3
import sys
import uuid
from datetime import date, datetime, timezone
from typing import Iterable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from spendlog.commands.common import build_criteria, parse_date_option, require_database, resolve_period
from spendlog.config import get_settings
from spendlog.dates import format_display_date, period_label
from spendlog.domain.expenses import (
    ExpenseRecord,
    add_expense,
    calculate_total,
    category_index,
    category_label,
    delete_expense,
    filter_expenses,
    find_expense,
    find_malformed,
    format_currency,
    select_by_month,
    sort_expenses,
)
from spendlog.domain.models import CategoryId
from spendlog.store.queries import load_categories, load_records, save_records

console = Console()


def warn_malformed(records: Iterable[ExpenseRecord]) -> None:
    """Print a warning if any records have unreadable amounts or dates."""
    malformed = find_malformed(records)
    if malformed:
        console.print(
            f"[yellow]{len(malformed)} expense(s) have an unreadable amount or date "
            "and count as zero in totals[/yellow]"
        )


def add_command(
    description: str,
    amount: float,
    category: str = "other",
    expense_date: str | None = None,
) -> None:
    """Add an expense.

    Args:
        description: What the money was spent on.
        amount: Amount in rupees (must be positive).
        category: Category id.
        expense_date: Date of the expense (defaults to today).
    """
    db_path = require_database()

    description = description.strip()
    if not description:
        console.print("[red]Description cannot be empty[/red]")
        sys.exit(1)

    if not math.isfinite(amount) or amount <= 0:
        console.print("[red]Amount must be a positive number[/red]")
        sys.exit(1)

    when = parse_date_option(expense_date) or date.today()

    try:
        categories = load_categories(db_path)
        index = category_index(categories)
        if CategoryId(category) not in index:
            console.print(f"[red]Unknown category '{escape(category)}'[/red]")
            console.print(f"[dim]Available: {escape(', '.join(index))}[/dim]")
            sys.exit(1)

        record = ExpenseRecord(
            id=uuid.uuid4().hex,
            amount=amount,
            category=CategoryId(category),
            description=description,
            date=when.isoformat(),
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        records = add_expense(load_records(db_path), record)
        save_records(records, db_path)

        settings = get_settings()
        console.print("[green]✓[/green] Expense added:")
        console.print(f"  Date: {format_display_date(record.date)}")
        console.print(f"  Description: {escape(record.description)}")
        console.print(f"  Amount: {format_currency(amount, settings.currency_symbol)}")
        console.print(f"  Category: {escape(category_label(record.category, index))}")
        console.print(f"[dim]  ID: {record.id}[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(expense_id: str, yes: bool = False) -> None:
    """Delete an expense by id."""
    db_path = require_database()

    try:
        records = load_records(db_path)
        record = find_expense(records, expense_id)

        if record is None:
            console.print(f"[yellow]No expense found with ID '{expense_id}'[/yellow]")
            sys.exit(1)

        amount = format_currency(record.value, get_settings().currency_symbol)
        console.print(f"{format_display_date(record.date)}  {escape(record.description)}  {amount}")
        if not yes and not typer.confirm("Are you sure you want to delete this expense?", default=False):
            console.print("[dim]Cancelled[/dim]")
            return

        save_records(delete_expense(records, expense_id), db_path)
        console.print("[green]✓[/green] Expense deleted")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def list_command(
    month: int | None = None,
    year: int | None = None,
    categories: list[str] | None = None,
    start: str | None = None,
    end: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    order: str | None = None,
) -> None:
    """List expenses for a month, filtered and sorted."""
    db_path = require_database()
    settings = get_settings()

    month_index, period_year = resolve_period(month, year)
    criteria = build_criteria(categories, start, end, search)
    sort_key = sort_by or settings.sort_key
    direction = order or settings.sort_direction

    try:
        records = load_records(db_path)
        index = category_index(load_categories(db_path))

        month_records = select_by_month(records, month_index, period_year)
        filtered = filter_expenses(month_records, criteria)
        try:
            ordered = sort_expenses(filtered, sort_key, direction)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            console.print("[dim]Sort by 'date', 'amount' or 'category'; order 'asc' or 'desc'[/dim]")
            sys.exit(1)

        warn_malformed(records)

        if not ordered:
            console.print(f"[yellow]No expenses found for {period_label(month_index, period_year)}[/yellow]")
            return

        title = f"{period_label(month_index, period_year)} (showing {len(ordered)} of {len(month_records)})"
        table = Table(title=title)
        table.add_column("Date", style="cyan")
        table.add_column("Description", style="white")
        table.add_column("Category", style="magenta")
        table.add_column("Amount", justify="right")
        table.add_column("ID", style="dim")

        for record in ordered:
            table.add_row(
                format_display_date(record.date) or "[dim]?[/dim]",
                escape(record.description),
                escape(category_label(record.category, index)),
                f"[red]{format_currency(record.value, settings.currency_symbol)}[/red]",
                record.id,
            )

        console.print(table)
        total = calculate_total(ordered)
        console.print(f"\n[bold]Total:[/bold] {format_currency(total, settings.currency_symbol)}")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
