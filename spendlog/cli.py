"""CLI entry point for spendlog."""

import typer

from spendlog.commands.admin import backup_command, categories_command, config_command, init_command, years_command
from spendlog.commands.budget import budget_command
from spendlog.commands.expenses import add_command, delete_command, list_command
from spendlog.commands.export import export_command, export_year_command
from spendlog.commands.report import report_command, yearly_command

app = typer.Typer(
    name="spendlog",
    help="spendlog - Track your expenses smartly",
    add_completion=False,
)

MONTH_HELP = "Month number 1-12 (default: current month)"
YEAR_HELP = "Year (default: current year)"


@app.callback()
def main() -> None:
    """spendlog - Track your expenses smartly."""
    pass


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize spendlog database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: next to the database)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="config")
def config(
    key: str = typer.Argument(None, help="Setting to show or change (omit to list all)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """Show or change your settings."""
    config_command(key, value)


@app.command()
def add(
    description: str,
    amount: float,
    category: str = typer.Option("other", "--category", "-c", help="Category id (see 'spendlog categories')"),
    date: str = typer.Option(None, "--date", "-d", help="Expense date (default: today)"),
) -> None:
    """Add an expense."""
    add_command(description, amount, category, date)


@app.command()
def delete(
    expense_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking"),
) -> None:
    """Delete an expense by its ID."""
    delete_command(expense_id, yes)


@app.command(name="list")
def list_expenses(
    month: int = typer.Option(None, "--month", "-m", help=MONTH_HELP),
    year: int = typer.Option(None, "--year", "-y", help=YEAR_HELP),
    category: list[str] = typer.Option(None, "--category", "-c", help="Only these category ids (repeatable)"),
    start: str = typer.Option(None, "--from", help="Earliest date (inclusive)"),
    end: str = typer.Option(None, "--to", help="Latest date (inclusive)"),
    search: str = typer.Option(None, "--search", "-s", help="Text to look for in descriptions"),
    sort_by: str = typer.Option(None, "--sort", help="Sort by 'date', 'amount' or 'category'"),
    order: str = typer.Option(None, "--order", help="Sort order 'asc' or 'desc'"),
) -> None:
    """List your expenses for a month."""
    list_command(month, year, category, start, end, search, sort_by, order)


@app.command()
def budget(
    set_amount: str = typer.Option(None, "--set", help="Set your monthly budget (in ₹)"),
    month: int = typer.Option(None, "--month", "-m", help=MONTH_HELP),
    year: int = typer.Option(None, "--year", "-y", help=YEAR_HELP),
) -> None:
    """Show your budget usage, or set your monthly budget."""
    budget_command(set_amount, month, year)


@app.command(name="report")
def report(
    month: int = typer.Option(None, "--month", "-m", help=MONTH_HELP),
    year: int = typer.Option(None, "--year", "-y", help=YEAR_HELP),
    category: list[str] = typer.Option(None, "--category", "-c", help="Only these category ids (repeatable)"),
    start: str = typer.Option(None, "--from", help="Earliest date (inclusive)"),
    end: str = typer.Option(None, "--to", help="Latest date (inclusive)"),
    search: str = typer.Option(None, "--search", "-s", help="Text to look for in descriptions"),
) -> None:
    """Show your budget summary and spending breakdown for a month."""
    report_command(month, year, category, start, end, search)


@app.command()
def yearly(
    year: int = typer.Option(None, "--year", "-y", help=YEAR_HELP),
) -> None:
    """Show your month-by-month spending for a year."""
    yearly_command(year)


@app.command()
def years() -> None:
    """List the years you have expenses for."""
    years_command()


@app.command()
def categories() -> None:
    """List your expense categories."""
    categories_command()


@app.command(name="export")
def export(
    month: int = typer.Option(None, "--month", "-m", help=MONTH_HELP),
    year: int = typer.Option(None, "--year", "-y", help=YEAR_HELP),
    all: bool = typer.Option(False, "--all", "-a", help="Export every expense (or the whole --year)"),
    category: list[str] = typer.Option(None, "--category", "-c", help="Only these category ids (repeatable)"),
    start: str = typer.Option(None, "--from", help="Earliest date (inclusive)"),
    end: str = typer.Option(None, "--to", help="Latest date (inclusive)"),
    search: str = typer.Option(None, "--search", "-s", help="Text to look for in descriptions"),
    output_dir: str = typer.Option(None, "--output", "-o", help="Output directory (default: from config)"),
) -> None:
    """Export your expenses to CSV."""
    export_command(month, year, all, category, start, end, search, output_dir)


@app.command(name="export-year")
def export_year(
    year: int = typer.Option(None, "--year", "-y", help=YEAR_HELP),
    output_dir: str = typer.Option(None, "--output", "-o", help="Output directory (default: from config)"),
) -> None:
    """Export your monthly totals for a year to CSV."""
    export_year_command(year, output_dir)


if __name__ == "__main__":
    app()
