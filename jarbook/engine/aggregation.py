"""
Aggregation Engine

Turns a snapshot of expenses into time-bucketed and category-bucketed
totals. Every function here is pure: same input, same output, no I/O.

Ranking is stable: categories with equal amounts keep the order in which
they were first encountered.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from jarbook.engine.money import ZERO, in_month, in_year, percent_of
from jarbook.models.catalog import find_category
from jarbook.models.records import Expense
from jarbook.models.views import CategoryShare, TimeRange


def expenses_in_month(expenses: Iterable[Expense], month: int, year: int) -> list[Expense]:
    return [e for e in expenses if in_month(e.date, month, year)]


def expenses_in_year(expenses: Iterable[Expense], year: int) -> list[Expense]:
    return [e for e in expenses if in_year(e.date, year)]


def _sum(expenses: Iterable[Expense]) -> Decimal:
    return sum((e.amount for e in expenses), ZERO)


def monthly_total(expenses: Iterable[Expense], month: int, year: int) -> Decimal:
    """Total spent in the given month (1-12). 0 when nothing matches."""
    return _sum(expenses_in_month(expenses, month, year))


def yearly_total(expenses: Iterable[Expense], year: int) -> Decimal:
    return _sum(expenses_in_year(expenses, year))


def group_by_category(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """Sum amounts per category id, in first-encounter order."""
    grouped: dict[str, Decimal] = {}
    for expense in expenses:
        grouped[expense.category_id] = grouped.get(expense.category_id, ZERO) + expense.amount
    return grouped


def by_category(expenses: Iterable[Expense], month: int, year: int) -> dict[str, Decimal]:
    """Per-category totals for one month. Empty dict when nothing matches."""
    return group_by_category(expenses_in_month(expenses, month, year))


def by_category_in_year(expenses: Iterable[Expense], year: int) -> dict[str, Decimal]:
    return group_by_category(expenses_in_year(expenses, year))


def ranked_categories(
    by_category_map: Mapping[str, Decimal],
    total: Decimal,
    counts: Optional[Mapping[str, int]] = None,
) -> list[CategoryShare]:
    """
    Sort categories by amount, largest first, and attach percentages.

    Percentages are computed against `total`; when total is 0 every
    share is 0 rather than raising. Ties keep mapping order.
    """
    shares = [
        CategoryShare(
            category_id=category_id,
            amount=amount,
            percentage=percent_of(amount, total),
            category=find_category(category_id),
            expense_count=(counts or {}).get(category_id, 0),
        )
        for category_id, amount in by_category_map.items()
    ]
    # sorted() is stable, so equal amounts stay in encounter order
    return sorted(shares, key=lambda s: s.amount, reverse=True)


def category_breakdown(
    expenses: Iterable[Expense],
    time_range: TimeRange,
    month: int,
    year: int,
) -> tuple[Decimal, list[CategoryShare]]:
    """
    Ranked category shares for a month or a whole year.

    Returns (total, shares). `month` is ignored for TimeRange.YEAR.
    """
    if time_range == TimeRange.MONTH:
        selected = expenses_in_month(expenses, month, year)
    else:
        selected = expenses_in_year(expenses, year)

    counts: dict[str, int] = {}
    for expense in selected:
        counts[expense.category_id] = counts.get(expense.category_id, 0) + 1

    total = _sum(selected)
    return total, ranked_categories(group_by_category(selected), total, counts)


def top_categories(ranked: list[CategoryShare], limit: int = 5) -> list[CategoryShare]:
    """The dashboard's short list of biggest categories."""
    return ranked[:limit]
