"""Tests for spendlog.domain.summary pure functions."""

from datetime import date

import pytest

from spendlog.domain.expenses import ExpenseRecord, calculate_total, select_by_year
from spendlog.domain.models import Amount, CategoryId, MonthIndex, Year
from spendlog.domain.summary import (
    EMPTY_BUCKET,
    CategoryTotal,
    MonthlyBucket,
    YearlyExtremes,
    bucket_marker,
    budget_status,
    budget_summary,
    calculate_budget_percentage,
    calculate_histogram_bar_length,
    category_shares,
    category_totals,
    daily_totals,
    monthly_totals,
    top_categories,
    yearly_extremes,
    yearly_summary,
)


def make_record(id: str, amount: object, date: str, category: str = "food") -> ExpenseRecord:
    return ExpenseRecord(id=id, amount=amount, category=CategoryId(category), description=id, date=date)


def make_buckets(totals: dict[int, float]) -> list[MonthlyBucket]:
    names = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    return [
        MonthlyBucket(
            name=name,
            month=MonthIndex(i),
            total=Amount(totals.get(i, 0.0)),
            count=1 if totals.get(i) else 0,
        )
        for i, name in enumerate(names)
    ]


RECORDS = [
    make_record("1", 100, "2024-03-05", "food"),
    make_record("2", 200, "2024-03-28", "bills"),
    make_record("3", 100, "2024-07-14", "transport"),
    make_record("4", 40, "2023-03-05", "food"),
    make_record("5", "n/a", "2024-08-01", "food"),
    make_record("6", 15.5, "2024-12-31", "shopping"),
    make_record("7", 9, "someday", "food"),
]

COLLECTIONS = [[], RECORDS, RECORDS[:1], RECORDS[3:]]


class TestCategoryTotals:
    """Tests for category_totals."""

    def test_totals_and_counts_in_first_appearance_order(self) -> None:
        """Should total each category in order of first appearance."""
        result = category_totals(RECORDS)

        assert [item.category for item in result] == ["food", "bills", "transport", "shopping"]
        food = result[0]
        assert food.total == 149
        assert food.count == 4

    def test_empty(self) -> None:
        """Should return no totals for no records."""
        assert category_totals([]) == []

    @pytest.mark.parametrize("records", COLLECTIONS)
    def test_sums_match_overall_total(self, records: list[ExpenseRecord]) -> None:
        """Should partition the total and the count exactly."""
        result = category_totals(records)

        assert sum(item.total for item in result) == pytest.approx(calculate_total(records))
        assert sum(item.count for item in result) == len(records)


class TestTopCategories:
    """Tests for top_categories."""

    def test_ranks_by_total_descending(self) -> None:
        """Should put the largest totals first."""
        totals = [
            CategoryTotal(CategoryId("a"), Amount(10), 1),
            CategoryTotal(CategoryId("b"), Amount(30), 1),
            CategoryTotal(CategoryId("c"), Amount(20), 1),
        ]
        assert [item.category for item in top_categories(totals)] == ["b", "c", "a"]

    def test_limit_and_stable_ties(self) -> None:
        """Should cut at the limit and keep input order for ties."""
        totals = [CategoryTotal(CategoryId(str(i)), Amount(5), 1) for i in range(7)]
        assert [item.category for item in top_categories(totals, limit=5)] == ["0", "1", "2", "3", "4"]


class TestCategoryShares:
    """Tests for category_shares."""

    def test_percentages(self) -> None:
        """Should compute each share of the combined total."""
        totals = [
            CategoryTotal(CategoryId("a"), Amount(75), 3),
            CategoryTotal(CategoryId("b"), Amount(25), 1),
        ]

        shares = category_shares(totals)

        assert [share.percentage for share in shares] == [75.0, 25.0]
        assert shares[0].count == 3

    def test_zero_total(self) -> None:
        """Should report 0% when nothing was spent."""
        shares = category_shares([CategoryTotal(CategoryId("a"), Amount(0), 1)])
        assert shares[0].percentage == 0.0


class TestMonthlyTotals:
    """Tests for monthly_totals."""

    def test_always_twelve_buckets(self) -> None:
        """Should produce twelve ascending buckets even with no data."""
        buckets = monthly_totals([], Year(2024))

        assert len(buckets) == 12
        assert [b.month for b in buckets] == list(range(12))
        assert [b.name for b in buckets][:3] == ["Jan", "Feb", "Mar"]
        assert all(b.total == 0 and b.count == 0 for b in buckets)

    def test_buckets_for_year(self) -> None:
        """Should total and count per month of the requested year only."""
        buckets = monthly_totals(RECORDS, Year(2024))

        assert buckets[2].total == 300
        assert buckets[2].count == 2
        assert buckets[6].total == 100
        assert buckets[7].total == 0  # malformed amount
        assert buckets[7].count == 1
        assert buckets[11].total == 15.5

    @pytest.mark.parametrize("year", [2022, 2023, 2024])
    @pytest.mark.parametrize("records", COLLECTIONS)
    def test_sum_matches_year_total(self, records: list[ExpenseRecord], year: int) -> None:
        """Should add up to the year's total."""
        buckets = monthly_totals(records, Year(year))

        assert len(buckets) == 12
        assert sum(b.total for b in buckets) == pytest.approx(calculate_total(select_by_year(records, Year(year))))


class TestYearlyExtremes:
    """Tests for yearly_extremes."""

    def test_scenario_march_and_july(self) -> None:
        """Should pick March as highest and July as lowest, ignoring empty months."""
        records = [
            make_record("1", 300, "2024-03-10"),
            make_record("2", 100, "2024-07-02"),
        ]

        extremes = yearly_extremes(monthly_totals(records, Year(2024)))

        assert extremes.highest.name == "Mar"
        assert extremes.highest.total == 300
        assert extremes.lowest.name == "Jul"
        assert extremes.lowest.total == 100

    def test_all_zero_gives_sentinel(self) -> None:
        """Should return the '-' sentinel on both sides when nothing was spent."""
        extremes = yearly_extremes(make_buckets({}))

        assert extremes.highest == EMPTY_BUCKET
        assert extremes.lowest == EMPTY_BUCKET
        assert extremes.highest.name == "-"
        assert extremes.highest.total == 0

    def test_empty_input_gives_sentinel(self) -> None:
        """Should handle no buckets at all."""
        assert yearly_extremes([]) == YearlyExtremes(EMPTY_BUCKET, EMPTY_BUCKET)

    def test_single_month_is_both(self) -> None:
        """Should report a lone month as both highest and lowest."""
        extremes = yearly_extremes(make_buckets({4: 80}))

        assert extremes.highest.name == "May"
        assert extremes.lowest.name == "May"

    def test_ties_pick_earliest_month(self) -> None:
        """Should keep the first month reaching the extreme."""
        extremes = yearly_extremes(make_buckets({1: 50, 3: 200, 5: 50, 9: 200}))

        assert extremes.highest.name == "Apr"
        assert extremes.lowest.name == "Feb"


class TestBucketMarker:
    """Tests for bucket_marker."""

    def test_marks_by_value(self) -> None:
        """Should mark every month equal to an extreme."""
        buckets = make_buckets({0: 10, 1: 90, 2: 10, 3: 50})
        extremes = yearly_extremes(buckets)

        markers = [bucket_marker(b, extremes) for b in buckets[:5]]

        assert markers == ["lowest", "highest", "lowest", None, None]

    def test_lone_month_reads_as_highest(self) -> None:
        """Should prefer highest when a month equals both extremes."""
        buckets = make_buckets({6: 42})
        extremes = yearly_extremes(buckets)

        assert bucket_marker(buckets[6], extremes) == "highest"

    def test_empty_months_unmarked(self) -> None:
        """Should never mark a month without spending."""
        buckets = make_buckets({})
        extremes = yearly_extremes(buckets)
        assert all(bucket_marker(b, extremes) is None for b in buckets)


class TestYearlySummary:
    """Tests for yearly_summary."""

    def test_summary_fields(self) -> None:
        """Should total the year and average across twelve months."""
        summary = yearly_summary(RECORDS, Year(2024))

        assert summary.year == 2024
        assert len(summary.buckets) == 12
        assert summary.total == pytest.approx(415.5)
        assert summary.count == 5
        assert summary.average == pytest.approx(415.5 / 12)
        assert summary.highest.name == "Mar"
        assert summary.lowest.name == "Dec"

    def test_empty_year(self) -> None:
        """Should give zeros and sentinels for a year without data."""
        summary = yearly_summary(RECORDS, Year(2001))

        assert summary.total == 0
        assert summary.count == 0
        assert summary.average == 0
        assert summary.highest == EMPTY_BUCKET
        assert summary.lowest == EMPTY_BUCKET


class TestDailyTotals:
    """Tests for daily_totals."""

    def test_totals_per_requested_day(self) -> None:
        """Should total each requested day and zero the rest."""
        records = [
            make_record("1", 10, "2024-03-01"),
            make_record("2", 5, "2024-03-01"),
            make_record("3", 7, "2024-03-03"),
            make_record("4", 99, "2024-02-01"),
        ]
        days = [date(2024, 3, 1), date(2024, 3, 2), date(2024, 3, 3)]

        result = daily_totals(records, days)

        assert [item.day for item in result] == days
        assert [item.total for item in result] == [15, 0, 7]


class TestBudget:
    """Tests for budget percentage, status and summary."""

    def test_percentage(self) -> None:
        """Should compute percentage used."""
        assert calculate_budget_percentage(Amount(2500), Amount(5000)) == 50.0

    def test_percentage_non_positive_budget(self) -> None:
        """Should return 0 for a zero budget."""
        assert calculate_budget_percentage(Amount(100), Amount(0)) == 0.0

    @pytest.mark.parametrize(
        ("percentage", "expected"),
        [(0, "success"), (69.9, "success"), (70, "warning"), (89.9, "warning"), (90, "danger"), (150, "danger")],
    )
    def test_status_thresholds(self, percentage: float, expected: str) -> None:
        """Should switch to warning at 70% and danger at 90%."""
        assert budget_status(percentage) == expected

    def test_custom_thresholds(self) -> None:
        """Should honour configured thresholds."""
        assert budget_status(55, warning_threshold=50, danger_threshold=60) == "warning"

    def test_summary_over_budget(self) -> None:
        """Should report negative remaining when overspent."""
        summary = budget_summary(Amount(5000), Amount(6000), 12)

        assert summary.remaining == -1000
        assert summary.percentage_used == 120.0
        assert summary.status == "danger"
        assert summary.count == 12

    def test_summary_under_budget(self) -> None:
        """Should report what is left."""
        summary = budget_summary(Amount(5000), Amount(1000), 3)

        assert summary.remaining == 4000
        assert summary.status == "success"


class TestCalculateHistogramBarLength:
    """Tests for calculate_histogram_bar_length."""

    def test_scales_to_width(self) -> None:
        """Should scale against the maximum."""
        assert calculate_histogram_bar_length(Amount(50), Amount(100), 30) == 15
        assert calculate_histogram_bar_length(Amount(100), Amount(100), 30) == 30

    def test_zero_max(self) -> None:
        """Should return 0 when there is nothing to scale against."""
        assert calculate_histogram_bar_length(Amount(0), Amount(0), 30) == 0
