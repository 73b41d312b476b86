"""
Aggregation & allocation engine.

Pure functions over record snapshots. Nothing in this package performs
I/O or mutates its inputs.
"""

from jarbook.engine.aggregation import (
    by_category,
    by_category_in_year,
    category_breakdown,
    expenses_in_month,
    expenses_in_year,
    group_by_category,
    monthly_total,
    ranked_categories,
    top_categories,
    yearly_total,
)
from jarbook.engine.debts import (
    apply_payment,
    portfolio,
    progress_percent,
    remaining,
)
from jarbook.engine.jars import (
    allocated_amount,
    allocation_summary,
    apply_default_preset,
    irregular_income_total,
    jar_progress,
    regular_income_total,
    remaining_allocatable,
    total_allocated_percentage,
    total_income,
)
from jarbook.engine.layout import bubble_layout, bubble_size, grid_layout
from jarbook.engine.money import (
    format_currency,
    in_month,
    in_year,
    month_label,
    next_month,
    previous_month,
    year_label,
    yearly_projection,
)

__all__ = [
    # Aggregation
    "by_category",
    "by_category_in_year",
    "category_breakdown",
    "expenses_in_month",
    "expenses_in_year",
    "group_by_category",
    "monthly_total",
    "ranked_categories",
    "top_categories",
    "yearly_total",
    # Debts
    "apply_payment",
    "portfolio",
    "progress_percent",
    "remaining",
    # Jars
    "allocated_amount",
    "allocation_summary",
    "apply_default_preset",
    "irregular_income_total",
    "jar_progress",
    "regular_income_total",
    "remaining_allocatable",
    "total_allocated_percentage",
    "total_income",
    # Layout
    "bubble_layout",
    "bubble_size",
    "grid_layout",
    # Money / dates
    "format_currency",
    "in_month",
    "in_year",
    "month_label",
    "next_month",
    "previous_month",
    "year_label",
    "yearly_projection",
]
