"""Report commands for monthly and yearly spending summaries."""

import sqlite3
import sys
from datetime import date

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from spendlog.commands.common import build_criteria, require_database, resolve_period
from spendlog.commands.expenses import warn_malformed
from spendlog.config import Settings, get_settings
from spendlog.dates import period_label, recent_days
from spendlog.domain.expenses import (
    Category,
    ExpenseRecord,
    calculate_total,
    category_color,
    category_index,
    category_label,
    filter_expenses,
    format_currency,
    select_by_month,
)
from spendlog.domain.models import CategoryId, Year
from spendlog.domain.summary import (
    BudgetSummary,
    YearlyExtremes,
    bucket_marker,
    budget_summary,
    calculate_histogram_bar_length,
    category_shares,
    category_totals,
    daily_totals,
    top_categories,
    yearly_summary,
)
from spendlog.store.queries import load_budget, load_categories, load_records

console = Console()

STATUS_COLORS = {"success": "green", "warning": "yellow", "danger": "red"}


def render_budget_summary(summary: BudgetSummary, label: str, settings: Settings) -> None:
    """Render the budget card for a period.

    Args:
        summary: Budget usage.
        label: Period label (e.g., "March 2024").
        settings: Display settings.
    """
    symbol = settings.currency_symbol
    color = STATUS_COLORS[summary.status]

    console.print(f"[bold cyan]{label}[/bold cyan]\n")
    console.print(f"  Monthly budget:  {format_currency(summary.budget, symbol)}")
    console.print(f"  Total expenses:  [red]{format_currency(summary.spent, symbol)}[/red]")

    remaining = format_currency(abs(summary.remaining), symbol)
    if summary.remaining < 0:
        console.print(f"  Over budget by:  [red]{remaining}[/red]")
    else:
        console.print(f"  Remaining:       [{color}]{remaining}[/{color}]")

    console.print(f"  Transactions:    {summary.count}")

    bar_width = 30
    filled = max(0, min(int(summary.percentage_used / 100 * bar_width), bar_width))
    bar = "█" * filled + "░" * (bar_width - filled)
    console.print(f"  [{color}]{bar}[/{color}] {summary.percentage_used:.1f}% of budget used\n")


def render_category_breakdown(
    records: list[ExpenseRecord],
    index: dict[CategoryId, Category],
    settings: Settings,
) -> None:
    """Render category shares with histogram bars, then the top five."""
    symbol = settings.currency_symbol
    totals = category_totals(records)
    shares = category_shares(totals)
    max_amount = max((share.total for share in shares), default=0.0)

    console.print("[bold red]Expenses by category:[/bold red]\n")
    for share in shares:
        bar = "█" * calculate_histogram_bar_length(share.total, max_amount, 30)
        color = category_color(share.category, index)
        label = escape(category_label(share.category, index))
        amount = format_currency(share.total, symbol)
        console.print(f"  {label:20} {amount:>12} {share.percentage:5.1f}%  [{color}]{bar}[/{color}]")

    console.print("\n[bold]Top categories:[/bold]\n")
    for rank, item in enumerate(top_categories(totals), 1):
        label = escape(category_label(item.category, index))
        console.print(f"  {rank}. {label} - {format_currency(item.total, symbol)} ({item.count})")


def render_daily_trend(records: list[ExpenseRecord], settings: Settings, today: date | None = None) -> None:
    """Render spending for the last seven days."""
    days = recent_days(today or date.today(), 7)
    trend = daily_totals(records, days)
    max_amount = max((item.total for item in trend), default=0.0)

    console.print("\n[bold]Last 7 days:[/bold]\n")
    for item in trend:
        bar = "█" * calculate_histogram_bar_length(item.total, max_amount, 30)
        label = item.day.strftime("%b %d")
        console.print(f"  {label:8} {format_currency(item.total, settings.currency_symbol):>12}  {bar}")


def report_command(
    month: int | None = None,
    year: int | None = None,
    categories: list[str] | None = None,
    start: str | None = None,
    end: str | None = None,
    search: str | None = None,
) -> None:
    """Show the budget summary and spending breakdown for a month."""
    db_path = require_database()
    settings = get_settings()

    month_index, period_year = resolve_period(month, year)
    criteria = build_criteria(categories, start, end, search)

    try:
        records = load_records(db_path)
        budget = load_budget(db_path)
        index = category_index(load_categories(db_path))

        month_records = filter_expenses(select_by_month(records, month_index, period_year), criteria)
        summary = budget_summary(
            budget,
            calculate_total(month_records),
            len(month_records),
            settings.warning_threshold,
            settings.danger_threshold,
        )

        warn_malformed(records)
        render_budget_summary(summary, period_label(month_index, period_year), settings)

        if not month_records:
            console.print("[dim]No data to visualize. Add some expenses to see the breakdown.[/dim]")
            return

        render_category_breakdown(month_records, index, settings)
        render_daily_trend(month_records, settings)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def yearly_command(year: int | None = None) -> None:
    """Show month-by-month spending for a year."""
    db_path = require_database()
    settings = get_settings()
    symbol = settings.currency_symbol
    target_year = Year(year if year is not None else date.today().year)

    try:
        records = load_records(db_path)
        summary = yearly_summary(records, target_year)
        extremes = YearlyExtremes(highest=summary.highest, lowest=summary.lowest)

        warn_malformed(records)

        table = Table(title=f"Yearly Analysis - {target_year}")
        table.add_column("Month", style="cyan")
        table.add_column("Total", justify="right")
        table.add_column("Transactions", justify="right")
        table.add_column("", justify="left")

        max_amount = summary.highest.total
        for bucket in summary.buckets:
            marker = bucket_marker(bucket, extremes)
            bar = "█" * calculate_histogram_bar_length(bucket.total, max_amount, 30)
            if marker == "highest":
                bar = f"[red]{bar} ▲[/red]"
            elif marker == "lowest":
                bar = f"[green]{bar} ▼[/green]"
            table.add_row(bucket.name, format_currency(bucket.total, symbol), str(bucket.count), bar)

        console.print(table)

        console.print(f"\n  [bold]Total spending:[/bold]  {format_currency(summary.total, symbol)}")
        console.print(f"  [dim]{summary.count} transactions[/dim]")
        console.print(f"  [bold]Monthly average:[/bold] {format_currency(summary.average, symbol)}")
        console.print("  [dim]Across 12 months[/dim]")
        console.print(
            f"  [bold]Highest month:[/bold]   [red]{format_currency(summary.highest.total, symbol)}[/red]"
            f" ({summary.highest.name})"
        )
        console.print(
            f"  [bold]Lowest month:[/bold]    [green]{format_currency(summary.lowest.total, symbol)}[/green]"
            f" ({summary.lowest.name})"
        )

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
