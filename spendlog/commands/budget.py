"""Budget command for viewing and setting the monthly budget."""

import math
import sqlite3
import sys

from rich.console import Console

from spendlog.commands.common import require_database, resolve_period
from spendlog.commands.report import render_budget_summary
from spendlog.config import get_settings
from spendlog.dates import period_label
from spendlog.domain.expenses import calculate_total, format_currency, select_by_month
from spendlog.domain.models import Amount
from spendlog.domain.summary import budget_summary
from spendlog.store.queries import load_budget, load_records, save_budget

console = Console()


def parse_budget(amount_str: str) -> Amount | None:
    """Parse a budget amount entered by the user.

    Args:
        amount_str: String containing the amount in rupees.

    Returns:
        Budget amount, or None if not a positive number.
    """
    try:
        value = float(amount_str.replace(",", "").strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return Amount(value)


def budget_command(
    set_amount: str | None = None,
    month: int | None = None,
    year: int | None = None,
) -> None:
    """Show budget usage for a month, or set the monthly budget."""
    db_path = require_database()
    settings = get_settings()

    try:
        if set_amount is not None:
            budget = parse_budget(set_amount)
            if budget is None:
                console.print("[red]Please enter a valid budget amount[/red]")
                sys.exit(1)

            save_budget(budget, db_path)
            console.print(f"[green]✓[/green] Monthly budget set to {format_currency(budget, settings.currency_symbol)}")
            return

        month_index, period_year = resolve_period(month, year)
        month_records = select_by_month(load_records(db_path), month_index, period_year)
        summary = budget_summary(
            load_budget(db_path),
            calculate_total(month_records),
            len(month_records),
            settings.warning_threshold,
            settings.danger_threshold,
        )
        render_budget_summary(summary, period_label(month_index, period_year), settings)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
