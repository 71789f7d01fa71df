"""Admin commands for init, backup, settings, and listing categories and years."""

import math
import shutil
import sqlite3
import sys
import tomllib
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from spendlog.commands.common import require_database
from spendlog.config import DEFAULT_CONFIG, create_default_config, get_config_path, get_settings, set_value
from spendlog.domain.expenses import SORT_KEYS, available_years, group_by_month, select_by_year
from spendlog.store.queries import load_categories, load_records, save_categories
from spendlog.store.schema import get_db_path, init_database

console = Console()


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        console.print("[red]Database not found. Run 'spendlog init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = db_path.parent / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"spendlog_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        # Config is optional; defaults apply without it
        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database, default categories and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    save_categories(load_categories(db_path), db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize spendlog database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'spendlog init --force' to overwrite[/yellow]")
            sys.exit(1)

        if force and db_exists:
            db_path.unlink()

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def categories_command() -> None:
    """List the category catalog."""
    db_path = require_database()

    try:
        categories = load_categories(db_path)

        table = Table(title=f"Categories ({len(categories)})")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="white")
        table.add_column("Colour")

        for category in categories:
            swatch = f"[{category.color}]■[/{category.color}] {escape(category.color)}"
            table.add_row(escape(category.id), escape(category.name), swatch)

        console.print(table)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def years_command() -> None:
    """List the years that have expenses, most recent first."""
    db_path = require_database()

    try:
        records = load_records(db_path)
        years = available_years(records)

        if not years:
            console.print("[yellow]No expenses found[/yellow]")
            return

        months = group_by_month(records)

        table = Table(title="Years with expenses")
        table.add_column("Year", style="cyan")
        table.add_column("Active months", justify="right")
        table.add_column("Expenses", justify="right")

        for year in years:
            active = sum(1 for key in months if key.startswith(f"{year:04d}-"))
            table.add_row(str(year), str(active), str(len(select_by_year(records, year))))

        console.print(table)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def _coerce_setting(key: str, raw: str) -> object:
    """Convert a command-line value to the type of the setting.

    Raises:
        ValueError: If the value is not valid for the setting.
    """
    if isinstance(DEFAULT_CONFIG[key], float):
        number = float(raw)
        if not math.isfinite(number) or not 0 <= number <= 100:
            raise ValueError(f"{key} must be a percentage between 0 and 100")
        return number
    if key == "sort_key" and raw not in SORT_KEYS:
        raise ValueError(f"sort_key must be one of: {', '.join(SORT_KEYS)}")
    if key == "sort_direction" and raw not in ("asc", "desc"):
        raise ValueError("sort_direction must be 'asc' or 'desc'")
    return raw


def config_command(key: str | None = None, value: str | None = None) -> None:
    """Show settings, or change one."""
    try:
        if key is None:
            table = Table(title="Settings")
            table.add_column("Key", style="cyan")
            table.add_column("Value", style="white")
            for name, current in asdict(get_settings()).items():
                table.add_row(name, escape(str(current)))
            console.print(table)
            console.print(f"[dim]Config: {get_config_path()}[/dim]")
            return

        if key not in DEFAULT_CONFIG:
            console.print(f"[red]Unknown setting '{escape(key)}'[/red]")
            console.print(f"[dim]Available: {', '.join(DEFAULT_CONFIG)}[/dim]")
            sys.exit(1)

        if value is None:
            console.print(escape(str(asdict(get_settings())[key])))
            return

        try:
            coerced = _coerce_setting(key, value)
        except ValueError as e:
            console.print(f"[red]Invalid value for {key}: {escape(str(e))}[/red]")
            sys.exit(1)

        set_value(key, coerced)
        console.print(f"[green]✓[/green] {key} set to {escape(str(coerced))}")

    except tomllib.TOMLDecodeError as e:
        console.print(f"[red]Config file is not valid TOML: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
