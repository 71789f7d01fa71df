"""Pure functions for summary calculations and aggregations.

This module contains the functional core for reporting:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Nothing is cached: every summary is recomputed from the records passed in.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal, Sequence

from spendlog.dates import MONTH_ABBREVIATIONS, parse_record_date
from spendlog.domain.expenses import (
    ExpenseRecord,
    calculate_total,
    group_by_category,
    parse_amount,
    select_by_month,
    select_by_year,
)
from spendlog.domain.models import Amount, CategoryId, MonthIndex, Year

BudgetStatusLevel = Literal["success", "warning", "danger"]

WARNING_THRESHOLD = 70.0
DANGER_THRESHOLD = 90.0


@dataclass(frozen=True)
class MonthlyBucket:
    """Immutable per-month aggregate for one year."""

    name: str
    month: MonthIndex
    total: Amount
    count: int


# Stands in for "no month" when a year has no spending at all
EMPTY_BUCKET = MonthlyBucket(name="-", month=MonthIndex(-1), total=Amount(0.0), count=0)


@dataclass(frozen=True)
class CategoryTotal:
    """Immutable per-category aggregate."""

    category: CategoryId
    total: Amount
    count: int


@dataclass(frozen=True)
class CategoryShare:
    """Immutable category aggregate with its share of the grand total."""

    category: CategoryId
    total: Amount
    count: int
    percentage: float


@dataclass(frozen=True)
class DailyTotal:
    """Immutable spending total for a single day."""

    day: date
    total: Amount


@dataclass(frozen=True)
class YearlyExtremes:
    """Immutable highest and lowest spending months of a year."""

    highest: MonthlyBucket
    lowest: MonthlyBucket


@dataclass(frozen=True)
class YearlySummary:
    """Immutable summary of a year's spending."""

    year: Year
    buckets: list[MonthlyBucket]
    total: Amount
    count: int
    average: Amount
    highest: MonthlyBucket
    lowest: MonthlyBucket


@dataclass(frozen=True)
class BudgetSummary:
    """Immutable budget usage for a period."""

    budget: Amount
    spent: Amount
    remaining: Amount
    percentage_used: float
    status: BudgetStatusLevel
    count: int


def category_totals(records: Iterable[ExpenseRecord]) -> list[CategoryTotal]:
    """Total and count records per category.

    No sorting is applied; callers wanting a ranking should use
    `top_categories`.

    Args:
        records: Expense records.

    Returns:
        One CategoryTotal per distinct category, in order of first appearance.
    """
    return [
        CategoryTotal(category=category, total=calculate_total(group), count=len(group))
        for category, group in group_by_category(records).items()
    ]


def top_categories(totals: Sequence[CategoryTotal], limit: int = 5) -> list[CategoryTotal]:
    """Rank category totals by amount.

    Args:
        totals: Category totals.
        limit: Maximum entries to return.

    Returns:
        Highest totals first; ties keep their input order.
    """
    return sorted(totals, key=lambda item: item.total, reverse=True)[:limit]


def category_shares(totals: Sequence[CategoryTotal]) -> list[CategoryShare]:
    """Compute each category's percentage of the combined total.

    Args:
        totals: Category totals.

    Returns:
        CategoryShare per input entry in the same order. Percentages are 0
        when the combined total is not positive.
    """
    grand_total = sum(item.total for item in totals)
    return [
        CategoryShare(
            category=item.category,
            total=item.total,
            count=item.count,
            percentage=(item.total / grand_total) * 100 if grand_total > 0 else 0.0,
        )
        for item in totals
    ]


def monthly_totals(records: Sequence[ExpenseRecord], year: Year) -> list[MonthlyBucket]:
    """Bucket a year's spending by month.

    Args:
        records: Expense records (any years).
        year: Calendar year.

    Returns:
        Exactly 12 buckets, January first, including months with no spending.
    """
    buckets = []
    for index, name in enumerate(MONTH_ABBREVIATIONS):
        month_records = select_by_month(records, MonthIndex(index), year)
        buckets.append(
            MonthlyBucket(
                name=name,
                month=MonthIndex(index),
                total=calculate_total(month_records),
                count=len(month_records),
            )
        )
    return buckets


def yearly_extremes(buckets: Iterable[MonthlyBucket]) -> YearlyExtremes:
    """Find the highest and lowest spending months.

    Months with no spending are not considered. When several months share
    the extreme value the earliest one wins. A year with a single month of
    spending reports that month as both highest and lowest.

    Args:
        buckets: Monthly buckets in month order.

    Returns:
        YearlyExtremes; both sides are EMPTY_BUCKET when no month has spending.
    """
    with_data = [bucket for bucket in buckets if bucket.total > 0]

    highest = EMPTY_BUCKET
    for bucket in with_data:
        if bucket.total > highest.total:
            highest = bucket

    if not with_data:
        return YearlyExtremes(highest=highest, lowest=EMPTY_BUCKET)

    lowest = with_data[0]
    for bucket in with_data[1:]:
        if bucket.total < lowest.total:
            lowest = bucket

    return YearlyExtremes(highest=highest, lowest=lowest)


def bucket_marker(bucket: MonthlyBucket, extremes: YearlyExtremes) -> Literal["highest", "lowest"] | None:
    """Classify a bucket against the year's extremes by value.

    Comparison is by total, not identity, so every month equal to the
    highest total is marked highest (checked first), and every month equal
    to the lowest total is marked lowest. Months without spending are
    never marked.

    Args:
        bucket: Monthly bucket.
        extremes: Extremes of the same year.

    Returns:
        "highest", "lowest", or None.
    """
    if bucket.total <= 0:
        return None
    if bucket.total == extremes.highest.total:
        return "highest"
    if bucket.total == extremes.lowest.total:
        return "lowest"
    return None


def yearly_summary(records: Sequence[ExpenseRecord], year: Year) -> YearlySummary:
    """Summarise a year's spending.

    Args:
        records: Expense records (any years).
        year: Calendar year.

    Returns:
        YearlySummary with monthly buckets, total, transaction count,
        average across all 12 months, and the extreme months.
    """
    buckets = monthly_totals(records, year)
    year_records = select_by_year(records, year)
    total = calculate_total(year_records)
    extremes = yearly_extremes(buckets)

    return YearlySummary(
        year=year,
        buckets=buckets,
        total=total,
        count=len(year_records),
        average=Amount(total / 12),
        highest=extremes.highest,
        lowest=extremes.lowest,
    )


def daily_totals(records: Iterable[ExpenseRecord], days: Sequence[date]) -> list[DailyTotal]:
    """Total spending for each of the given days.

    Args:
        records: Expense records.
        days: Calendar days to report, in the order wanted.

    Returns:
        One DailyTotal per requested day (0.0 for days without spending).
    """
    by_day: dict[date, float] = {day: 0.0 for day in days}
    for record in records:
        parsed = parse_record_date(record.date)
        if parsed in by_day:
            by_day[parsed] += parse_amount(record.amount)
    return [DailyTotal(day=day, total=Amount(by_day[day])) for day in days]


def calculate_budget_percentage(spent: Amount, budget: Amount) -> float:
    """Calculate percentage of budget used.

    Args:
        spent: Amount spent.
        budget: Budget amount.

    Returns:
        Percentage of budget used (0-100+), 0 for a non-positive budget.
    """
    if budget <= 0:
        return 0.0
    return (spent / budget) * 100


def budget_status(
    percentage: float,
    warning_threshold: float = WARNING_THRESHOLD,
    danger_threshold: float = DANGER_THRESHOLD,
) -> BudgetStatusLevel:
    """Classify budget usage."""
    if percentage >= danger_threshold:
        return "danger"
    if percentage >= warning_threshold:
        return "warning"
    return "success"


def budget_summary(
    budget: Amount,
    spent: Amount,
    count: int,
    warning_threshold: float = WARNING_THRESHOLD,
    danger_threshold: float = DANGER_THRESHOLD,
) -> BudgetSummary:
    """Create budget usage summary for a period.

    Args:
        budget: Monthly budget.
        spent: Total spent in the period.
        count: Number of transactions in the period.
        warning_threshold: Usage percentage from which status is "warning".
        danger_threshold: Usage percentage from which status is "danger".

    Returns:
        BudgetSummary; `remaining` is negative when over budget.
    """
    percentage = calculate_budget_percentage(spent, budget)
    return BudgetSummary(
        budget=budget,
        spent=spent,
        remaining=Amount(budget - spent),
        percentage_used=percentage,
        status=budget_status(percentage, warning_threshold, danger_threshold),
        count=count,
    )


def calculate_histogram_bar_length(amount: Amount, max_amount: Amount, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
