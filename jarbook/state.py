"""
Application State

One immutable snapshot of every collection the user owns. The session
loads it at start and swaps in a fresh one after each successful
mutation; nothing edits a snapshot in place.

All derived numbers come from jarbook.engine; this module only wires
the snapshot to the engine functions the screens need.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from jarbook.engine import aggregation, layout, money
from jarbook.engine import debts as debt_model
from jarbook.engine import jars as jar_model
from jarbook.models.records import BankAccount, Debt, Expense, Income, Jar
from jarbook.models.views import (
    AllocationSummary,
    DashboardSummary,
    DebtPortfolio,
    TimeRange,
)


class FinanceState(BaseModel):
    """Snapshot of all persisted collections."""

    model_config = ConfigDict(frozen=True)

    expenses: list[Expense] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)
    jars: list[Jar] = Field(default_factory=list)
    incomes: list[Income] = Field(default_factory=list)
    bank_accounts: list[BankAccount] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "expenses": len(self.expenses),
            "debts": len(self.debts),
            "jars": len(self.jars),
            "incomes": len(self.incomes),
            "bank_accounts": len(self.bank_accounts),
        }

    # -- lookups -------------------------------------------------------------

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def find_debt(self, debt_id: str) -> Optional[Debt]:
        return next((d for d in self.debts if d.id == debt_id), None)

    def find_jar(self, jar_id: str) -> Optional[Jar]:
        return next((j for j in self.jars if j.id == jar_id), None)

    def find_income(self, income_id: str) -> Optional[Income]:
        return next((i for i in self.incomes if i.id == income_id), None)

    # -- derived views -------------------------------------------------------

    def dashboard(
        self,
        month: int,
        year: int,
        time_range: TimeRange = TimeRange.MONTH,
        top_limit: int = 5,
    ) -> DashboardSummary:
        """
        Everything the expense dashboard shows for one period.

        The category breakdown follows time_range; the monthly and yearly
        totals are always both computed.
        """
        month_total = aggregation.monthly_total(self.expenses, month, year)
        breakdown_total, shares = aggregation.category_breakdown(
            self.expenses, time_range, month, year
        )
        return DashboardSummary(
            time_range=time_range,
            month=month,
            year=year,
            monthly_total=month_total,
            yearly_total=aggregation.yearly_total(self.expenses, year),
            yearly_projection=money.yearly_projection(month_total),
            breakdown_total=breakdown_total,
            shares=shares,
            top=aggregation.top_categories(shares, top_limit),
            grid=layout.grid_layout(shares),
            bubbles=layout.bubble_layout(shares),
        )

    def expenses_for(self, month: int, year: int) -> list[Expense]:
        """The month's expenses, in stored (newest first) order."""
        return aggregation.expenses_in_month(self.expenses, month, year)

    def debt_portfolio(self) -> DebtPortfolio:
        return debt_model.portfolio(self.debts)

    def allocation_summary(self) -> AllocationSummary:
        return jar_model.allocation_summary(self.jars, self.incomes)
