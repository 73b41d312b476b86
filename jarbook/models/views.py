"""
Derived view models.

These are produced by the engine from stored records and consumed by
presentation. They are never persisted.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from jarbook.models.records import Category, Jar


class TimeRange(str, Enum):
    """Window a category breakdown is computed over."""
    MONTH = "month"
    YEAR = "year"


class ViewModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class CategoryShare(ViewModel):
    """One category's slice of a spending total."""

    category_id: str
    amount: Decimal
    percentage: Decimal = Field(
        ...,
        description="Share of the total in percent; 0 when the total is 0"
    )
    category: Optional[Category] = None
    expense_count: int = 0


class GridCell(ViewModel):
    """A category tile; the top-ranked one is rendered enlarged."""

    share: CategoryShare
    hero: bool = False


class Bubble(ViewModel):
    """A category bubble with its clamped display size."""

    share: CategoryShare
    size: Decimal


class DebtPortfolio(ViewModel):
    """Totals across all debts."""

    total_debt: Decimal
    total_paid: Decimal
    remaining_debt: Decimal
    overall_progress: Decimal


class JarAllocation(ViewModel):
    """A jar with its share of regular income and goal progress."""

    jar: Jar
    allocated_amount: Decimal
    progress: Optional[Decimal] = Field(
        default=None,
        description="Percent of target reached; None when the jar has no target"
    )


class AllocationSummary(ViewModel):
    """Jar allocation state against current incomes."""

    regular_income: Decimal
    irregular_income: Decimal
    total_income: Decimal
    allocated_percentage: Decimal
    remaining_percentage: Decimal
    allocations: list[JarAllocation] = Field(default_factory=list)

    @property
    def over_allocated(self) -> bool:
        """Advisory only: jars claim more than 100% of regular income."""
        return self.remaining_percentage < 0

    @property
    def show_remaining_hint(self) -> bool:
        """Whether to show the 'still unallocated' banner."""
        return self.remaining_percentage > 0 and len(self.allocations) > 0


class DashboardSummary(ViewModel):
    """The numbers and layouts of the expense dashboard for one period."""

    time_range: TimeRange
    month: int = Field(..., ge=1, le=12)
    year: int
    monthly_total: Decimal
    yearly_total: Decimal
    yearly_projection: Decimal = Field(
        ...,
        description="The month's total times twelve"
    )
    breakdown_total: Decimal = Field(
        ...,
        description="Total of the selected range; the base of the percentages"
    )
    shares: list[CategoryShare] = Field(default_factory=list)
    top: list[CategoryShare] = Field(default_factory=list)
    grid: list[GridCell] = Field(default_factory=list)
    bubbles: list[Bubble] = Field(default_factory=list)
