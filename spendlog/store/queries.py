"""Record store query functions.

Every collection is stored as one JSON document under a string key and is
always replaced as a whole.
"""

import json
import sqlite3
from pathlib import Path
from typing import Any, Iterable

from spendlog.domain.expenses import DEFAULT_CATEGORIES, Category, ExpenseRecord
from spendlog.domain.models import Amount
from spendlog.store.schema import get_db_path

EXPENSES_KEY = "budget_tracker_expenses"
BUDGET_KEY = "budget_tracker_budget"
CATEGORIES_KEY = "budget_tracker_categories"

DEFAULT_BUDGET = Amount(5000.0)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _get_value(key: str, db_path: Path | None = None) -> Any | None:
    """Read and decode the JSON document stored under a key.

    Args:
        key: Storage key.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Decoded value, or None if the key is unset or holds invalid JSON.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()

    if row is None:
        return None

    try:
        return json.loads(row["value"])
    except json.JSONDecodeError:
        return None


def _set_value(key: str, value: Any, db_path: Path | None = None) -> bool:
    """Encode a value as JSON and store it under a key, replacing any previous value.

    Args:
        key: Storage key.
        value: JSON-serialisable value.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True once the value is committed.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    payload = json.dumps(value, ensure_ascii=False)
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, payload),
            )
            conn.commit()
            return True
        except sqlite3.Error:
            conn.rollback()
            raise


def load_records(db_path: Path | None = None) -> tuple[ExpenseRecord, ...]:
    """Load all expense records.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Records in stored order; empty if none are stored.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    data = _get_value(EXPENSES_KEY, db_path)
    if not isinstance(data, list):
        return ()
    return tuple(ExpenseRecord.from_dict(item) for item in data if isinstance(item, dict))


def save_records(records: Iterable[ExpenseRecord], db_path: Path | None = None) -> bool:
    """Replace the stored expense records.

    Args:
        records: Complete record collection.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True once saved.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    return _set_value(EXPENSES_KEY, [record.to_dict() for record in records], db_path)


def load_budget(db_path: Path | None = None) -> Amount:
    """Load the monthly budget.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Stored budget, or DEFAULT_BUDGET if unset.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    data = _get_value(BUDGET_KEY, db_path)
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        return DEFAULT_BUDGET
    return Amount(float(data))


def save_budget(budget: Amount, db_path: Path | None = None) -> bool:
    """Store the monthly budget.

    Args:
        budget: Budget amount (validated by the caller).
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True once saved.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    return _set_value(BUDGET_KEY, budget, db_path)


def load_categories(db_path: Path | None = None) -> tuple[Category, ...]:
    """Load the category catalog.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Stored categories, or the built-in defaults if unset.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    data = _get_value(CATEGORIES_KEY, db_path)
    if not isinstance(data, list):
        return DEFAULT_CATEGORIES
    return tuple(Category.from_dict(item) for item in data if isinstance(item, dict))


def save_categories(categories: Iterable[Category], db_path: Path | None = None) -> bool:
    """Replace the stored category catalog.

    Args:
        categories: Complete catalog.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True once saved.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    return _set_value(CATEGORIES_KEY, [category.to_dict() for category in categories], db_path)
