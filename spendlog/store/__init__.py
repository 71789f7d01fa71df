"""Record store layer - provides persistence for the application.

This module re-exports all public store functions for easy importing.
"""

from spendlog.store.queries import (
    DEFAULT_BUDGET,
    load_budget,
    load_categories,
    load_records,
    save_budget,
    save_categories,
    save_records,
)
from spendlog.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "DEFAULT_BUDGET",
    "load_budget",
    "load_categories",
    "load_records",
    "save_budget",
    "save_categories",
    "save_records",
]
