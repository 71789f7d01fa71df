"""Pure functions for selecting, filtering and sorting expense records.

This module contains the functional core for expense queries:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Records are never modified; every function returns a new collection that
preserves the relative order of the input. Amounts are in rupees.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Sequence

from spendlog.dates import parse_record_date
from spendlog.domain.models import Amount, CategoryId, MonthIndex, SortDirection, SortKey, Year

FALLBACK_CATEGORY_COLOR = "#64748b"


@dataclass(frozen=True)
class ExpenseRecord:
    """Immutable expense record.

    `amount` keeps whatever value was stored (number or numeric string);
    use `value` or `parse_amount` to read it as a number.
    """

    id: str
    amount: Any
    category: CategoryId
    description: str
    date: str
    created_at: str | None = None

    @property
    def value(self) -> Amount:
        """Amount as a number, 0.0 when malformed."""
        return parse_amount(self.amount)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExpenseRecord":
        """Build a record from its stored JSON shape."""
        return cls(
            id=str(data.get("id", "")),
            amount=data.get("amount"),
            category=CategoryId(str(data.get("category", ""))),
            description=str(data.get("description", "")),
            date=str(data.get("date", "")),
            created_at=data.get("createdAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored JSON shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.date,
        }
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data


@dataclass(frozen=True)
class Category:
    """Immutable category definition."""

    id: CategoryId
    name: str
    color: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Category":
        """Build a category from its stored JSON shape."""
        category_id = str(data.get("id", ""))
        return cls(
            id=CategoryId(category_id),
            name=str(data.get("name", category_id)),
            color=str(data.get("color", FALLBACK_CATEGORY_COLOR)),
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to the stored JSON shape."""
        return {"id": self.id, "name": self.name, "color": self.color}


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(CategoryId("food"), "Food & Dining", "#ef4444"),
    Category(CategoryId("transport"), "Transport", "#f97316"),
    Category(CategoryId("entertainment"), "Entertainment", "#8b5cf6"),
    Category(CategoryId("bills"), "Bills & Utilities", "#06b6d4"),
    Category(CategoryId("shopping"), "Shopping", "#ec4899"),
    Category(CategoryId("health"), "Health & Fitness", "#10b981"),
    Category(CategoryId("other"), "Other", "#64748b"),
)


@dataclass(frozen=True)
class FilterCriteria:
    """Immutable set of optional, ANDed filter predicates.

    An empty `categories` set, a missing date bound or a blank search term
    each mean "no restriction" for that predicate. Date bounds may be given
    as dates or ISO date strings.
    """

    categories: frozenset[CategoryId] = field(default_factory=frozenset)
    start_date: date | str | None = None
    end_date: date | str | None = None
    search_term: str | None = None


def _to_number(value: Any) -> float | None:
    # JSON booleans are ints to float(), but never a valid amount
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_amount(value: Any) -> Amount:
    """Parse a stored amount into a number.

    Malformed amounts contribute nothing rather than failing the whole
    aggregation.

    Args:
        value: Stored amount (int, float or numeric string).

    Returns:
        Amount as float, or 0.0 if the value is not a finite number.
    """
    number = _to_number(value)
    return Amount(number if number is not None else 0.0)


def is_malformed(record: ExpenseRecord) -> bool:
    """Check whether a record has an unparseable amount or date.

    Args:
        record: Expense record.

    Returns:
        True if either the amount or the date cannot be read.
    """
    return _to_number(record.amount) is None or parse_record_date(record.date) is None


def find_malformed(records: Iterable[ExpenseRecord]) -> list[ExpenseRecord]:
    """List records whose amount or date cannot be parsed."""
    return [record for record in records if is_malformed(record)]


def select_by_month(records: Iterable[ExpenseRecord], month_index: MonthIndex, year: Year) -> list[ExpenseRecord]:
    """Select records dated in a given month of a given year.

    Args:
        records: Expense records.
        month_index: 0-based month (0 = January).
        year: Calendar year.

    Returns:
        Matching records in input order. Records with unparseable dates are excluded.
    """
    selected = []
    for record in records:
        parsed = parse_record_date(record.date)
        if parsed is not None and parsed.month - 1 == month_index and parsed.year == year:
            selected.append(record)
    return selected


def select_by_year(records: Iterable[ExpenseRecord], year: Year) -> list[ExpenseRecord]:
    """Select records dated in a given calendar year.

    Args:
        records: Expense records.
        year: Calendar year.

    Returns:
        Matching records in input order. Records with unparseable dates are excluded.
    """
    selected = []
    for record in records:
        parsed = parse_record_date(record.date)
        if parsed is not None and parsed.year == year:
            selected.append(record)
    return selected


def _on_or_after(record: ExpenseRecord, bound: date) -> bool:
    parsed = parse_record_date(record.date)
    return parsed is not None and parsed >= bound


def _on_or_before(record: ExpenseRecord, bound: date) -> bool:
    parsed = parse_record_date(record.date)
    return parsed is not None and parsed <= bound


def _date_bound(value: date | str | None) -> date | None:
    if value is None or value == "":
        return None
    parsed = parse_record_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date bound: {value!r}")
    return parsed


def filter_expenses(records: Iterable[ExpenseRecord], criteria: FilterCriteria) -> list[ExpenseRecord]:
    """Filter records by category, date range and description search.

    Predicates are applied in order: category set, start date (inclusive),
    end date (inclusive), case-insensitive description substring. Each one
    is skipped when absent.

    Args:
        records: Expense records.
        criteria: Filter criteria.

    Returns:
        New list of surviving records in input order.

    Raises:
        ValueError: If a date bound is a string that is not an ISO date.
    """
    start = _date_bound(criteria.start_date)
    end = _date_bound(criteria.end_date)
    filtered = list(records)

    if criteria.categories:
        filtered = [record for record in filtered if record.category in criteria.categories]

    if start is not None:
        filtered = [record for record in filtered if _on_or_after(record, start)]

    if end is not None:
        filtered = [record for record in filtered if _on_or_before(record, end)]

    if criteria.search_term and criteria.search_term.strip():
        search_lower = criteria.search_term.lower()
        filtered = [record for record in filtered if search_lower in str(record.description).lower()]

    return filtered


def calculate_total(records: Iterable[ExpenseRecord]) -> Amount:
    """Sum record amounts, counting malformed amounts as zero.

    Args:
        records: Expense records.

    Returns:
        Total amount (0.0 for no records).
    """
    return Amount(sum((parse_amount(record.amount) for record in records), 0.0))


def group_by_category(records: Iterable[ExpenseRecord]) -> dict[CategoryId, list[ExpenseRecord]]:
    """Partition records by their raw category id.

    Args:
        records: Expense records.

    Returns:
        Dictionary of category id to records, keyed in order of first
        appearance, records within a group in input order.
    """
    groups: dict[CategoryId, list[ExpenseRecord]] = {}
    for record in records:
        groups.setdefault(record.category, []).append(record)
    return groups


def group_by_month(records: Iterable[ExpenseRecord]) -> dict[str, list[ExpenseRecord]]:
    """Partition records by calendar month.

    Args:
        records: Expense records.

    Returns:
        Dictionary of "YYYY-MM" to records in input order. Records with
        unparseable dates are skipped.
    """
    groups: dict[str, list[ExpenseRecord]] = {}
    for record in records:
        parsed = parse_record_date(record.date)
        if parsed is None:
            continue
        groups.setdefault(f"{parsed.year:04d}-{parsed.month:02d}", []).append(record)
    return groups


def _date_sort_key(record: ExpenseRecord) -> date:
    return parse_record_date(record.date) or date.min


def _amount_sort_key(record: ExpenseRecord) -> float:
    return parse_amount(record.amount)


def _category_sort_key(record: ExpenseRecord) -> str:
    return str(record.category)


SORT_KEYS = {
    "date": _date_sort_key,
    "amount": _amount_sort_key,
    "category": _category_sort_key,
}


def sort_expenses(
    records: Iterable[ExpenseRecord],
    sort_by: SortKey = "date",
    direction: SortDirection = "desc",
) -> list[ExpenseRecord]:
    """Sort records by date, amount or category.

    The sort is stable in both directions: records with equal keys keep
    their input order. Unparseable dates sort as the earliest date and
    malformed amounts as zero.

    Args:
        records: Expense records.
        sort_by: "date", "amount" or "category" (case-sensitive id order).
        direction: "asc" or "desc".

    Returns:
        New sorted list.

    Raises:
        ValueError: If sort_by or direction is not recognised.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort direction: {direction}")

    return sorted(records, key=SORT_KEYS[sort_by], reverse=direction == "desc")


def available_years(records: Iterable[ExpenseRecord]) -> list[Year]:
    """List distinct years present in record dates.

    Args:
        records: Expense records.

    Returns:
        Distinct years, most recent first.
    """
    years = {parsed.year for parsed in (parse_record_date(record.date) for record in records) if parsed is not None}
    return [Year(year) for year in sorted(years, reverse=True)]


def add_expense(records: Sequence[ExpenseRecord], record: ExpenseRecord) -> tuple[ExpenseRecord, ...]:
    """Return a new collection with the record prepended (newest first)."""
    return (record, *records)


def delete_expense(records: Sequence[ExpenseRecord], expense_id: str) -> tuple[ExpenseRecord, ...]:
    """Return a new collection without the record with the given id."""
    return tuple(record for record in records if record.id != expense_id)


def find_expense(records: Iterable[ExpenseRecord], expense_id: str) -> ExpenseRecord | None:
    """Find a record by id, or None if absent."""
    for record in records:
        if record.id == expense_id:
            return record
    return None


def category_index(categories: Iterable[Category]) -> dict[CategoryId, Category]:
    """Build an id lookup for a category catalog.

    Args:
        categories: Category catalog (may contain duplicate ids).

    Returns:
        Dictionary of id to category; the first occurrence of a duplicate id wins.
    """
    index: dict[CategoryId, Category] = {}
    for category in categories:
        index.setdefault(category.id, category)
    return index


def category_label(category_id: CategoryId, index: dict[CategoryId, Category]) -> str:
    """Display name for a category id, falling back to the raw id."""
    category = index.get(category_id)
    return category.name if category else str(category_id)


def category_color(category_id: CategoryId, index: dict[CategoryId, Category]) -> str:
    """Display colour for a category id, falling back to a neutral grey."""
    category = index.get(category_id)
    return category.color if category else FALLBACK_CATEGORY_COLOR


def format_currency(amount: float, symbol: str = "₹") -> str:
    """Format an amount for display, rounded to whole rupees.

    Digits are grouped the Indian way: the last three, then pairs.

    Args:
        amount: Amount to format.
        symbol: Currency symbol.

    Returns:
        Formatted string (e.g., "₹1,23,457" or "-₹250"). Infinite totals show
        as "₹∞" and NaN as "₹?".
    """
    if math.isnan(amount):
        return f"{symbol}?"
    if math.isinf(amount):
        return f"-{symbol}∞" if amount < 0 else f"{symbol}∞"

    rounded = int(math.floor(abs(amount) + 0.5))
    digits = str(rounded)
    head, tail = digits[:-3], digits[-3:]

    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)

    grouped = ",".join([*groups, tail])
    sign = "-" if amount < 0 and rounded else ""
    return f"{sign}{symbol}{grouped}"
