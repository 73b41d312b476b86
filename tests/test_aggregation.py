"""Tests for the aggregation engine."""

from datetime import datetime
from decimal import Decimal

from jarbook.engine.aggregation import (
    by_category,
    by_category_in_year,
    category_breakdown,
    monthly_total,
    ranked_categories,
    top_categories,
    yearly_total,
)
from jarbook.models import Expense, TimeRange


def make_expense(amount, category_id, date, name="item"):
    return Expense(
        name=name,
        amount=Decimal(amount),
        category_id=category_id,
        date=date,
    )


def january_expenses():
    return [
        make_expense("500", "food", datetime(2025, 1, 5)),
        make_expense("300", "food", datetime(2025, 1, 12)),
        make_expense("200", "transport", datetime(2025, 1, 20)),
    ]


class TestTotals:
    """Tests for monthly and yearly totals."""

    def test_monthly_total(self):
        assert monthly_total(january_expenses(), 1, 2025) == Decimal("1000")

    def test_empty_month(self):
        """Test that a month without records totals 0 with no categories."""
        expenses = january_expenses()
        assert monthly_total(expenses, 2, 2025) == Decimal("0")
        assert by_category(expenses, 2, 2025) == {}

    def test_same_month_other_year_excluded(self):
        expenses = january_expenses() + [make_expense("999", "food", datetime(2024, 1, 5))]
        assert monthly_total(expenses, 1, 2025) == Decimal("1000")

    def test_no_expenses(self):
        assert monthly_total([], 1, 2025) == Decimal("0")
        assert yearly_total([], 2025) == Decimal("0")

    def test_yearly_total(self):
        expenses = january_expenses() + [
            make_expense("50", "health", datetime(2025, 11, 1)),
            make_expense("70", "health", datetime(2026, 1, 1)),
        ]
        assert yearly_total(expenses, 2025) == Decimal("1050")


class TestByCategory:
    """Tests for per-category grouping."""

    def test_by_category(self):
        assert by_category(january_expenses(), 1, 2025) == {
            "food": Decimal("800"),
            "transport": Decimal("200"),
        }

    def test_first_encounter_order(self):
        expenses = [
            make_expense("10", "transport", datetime(2025, 1, 1)),
            make_expense("10", "food", datetime(2025, 1, 2)),
            make_expense("10", "transport", datetime(2025, 1, 3)),
        ]
        assert list(by_category(expenses, 1, 2025)) == ["transport", "food"]

    def test_by_category_in_year(self):
        expenses = january_expenses() + [make_expense("100", "food", datetime(2025, 3, 1))]
        assert by_category_in_year(expenses, 2025)["food"] == Decimal("900")


class TestRankedCategories:
    """Tests for ranking and percentages."""

    def test_scenario_against_given_total(self):
        """Test percentages computed against the total passed in."""
        ranked = ranked_categories(
            {"food": Decimal("800"), "transport": Decimal("200")},
            Decimal("800"),
        )
        assert [s.category_id for s in ranked] == ["food", "transport"]
        assert ranked[0].amount == Decimal("800")
        assert ranked[0].percentage == Decimal("100")
        assert ranked[1].percentage == Decimal("25")

    def test_sorted_descending_and_sums_to_100(self):
        grouped = {
            "food": Decimal("120"),
            "housing": Decimal("500"),
            "pets": Decimal("30"),
            "health": Decimal("350"),
        }
        ranked = ranked_categories(grouped, sum(grouped.values()))
        amounts = [s.amount for s in ranked]
        assert amounts == sorted(amounts, reverse=True)
        assert abs(sum(s.percentage for s in ranked) - Decimal("100")) < Decimal("0.0001")

    def test_zero_total(self):
        """Test that a zero total gives 0% everywhere instead of raising."""
        ranked = ranked_categories({"food": Decimal("0"), "pets": Decimal("0")}, Decimal("0"))
        assert all(s.percentage == 0 for s in ranked)

    def test_ties_keep_encounter_order(self):
        grouped = {
            "pets": Decimal("100"),
            "food": Decimal("100"),
            "housing": Decimal("300"),
            "health": Decimal("100"),
        }
        ranked = ranked_categories(grouped, Decimal("600"))
        assert [s.category_id for s in ranked] == ["housing", "pets", "food", "health"]

    def test_joined_with_catalog(self):
        ranked = ranked_categories({"food": Decimal("1"), "mystery": Decimal("1")}, Decimal("2"))
        assert ranked[0].category.name == "อาหาร"
        assert ranked[1].category is None


class TestCategoryBreakdown:
    """Tests for the dashboard breakdown."""

    def test_month_range(self):
        total, shares = category_breakdown(january_expenses(), TimeRange.MONTH, 1, 2025)
        assert total == Decimal("1000")
        assert shares[0].category_id == "food"
        assert shares[0].percentage == Decimal("80")
        assert shares[0].expense_count == 2
        assert shares[1].expense_count == 1

    def test_year_range_ignores_month(self):
        expenses = january_expenses() + [make_expense("1000", "transport", datetime(2025, 6, 1))]
        total, shares = category_breakdown(expenses, TimeRange.YEAR, 3, 2025)
        assert total == Decimal("2000")
        assert shares[0].category_id == "transport"
        assert shares[0].amount == Decimal("1200")

    def test_empty_range(self):
        total, shares = category_breakdown([], TimeRange.MONTH, 1, 2025)
        assert total == Decimal("0")
        assert shares == []

    def test_top_categories(self):
        grouped = {f"c{i}": Decimal(100 - i) for i in range(8)}
        ranked = ranked_categories(grouped, sum(grouped.values()))
        top = top_categories(ranked)
        assert len(top) == 5
        assert [s.category_id for s in top] == ["c0", "c1", "c2", "c3", "c4"]
        assert len(top_categories(ranked, limit=3)) == 3
