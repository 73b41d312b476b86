"""
Debt Progress Model

Payoff progress for individual debts and for the whole portfolio.
apply_payment is the only place paid_amount moves outside a full edit,
and it always clamps into [0, total_amount].
"""

from decimal import Decimal
from typing import Iterable

from jarbook.engine.money import HUNDRED, ZERO, clamp, percent_of
from jarbook.models.records import Debt
from jarbook.models.views import DebtPortfolio


def remaining(debt: Debt) -> Decimal:
    return debt.total_amount - debt.paid_amount


def progress_percent(debt: Debt) -> Decimal:
    """Percent paid off, in [0, 100]; 0 for a zero-total debt."""
    return clamp(percent_of(debt.paid_amount, debt.total_amount), ZERO, HUNDRED)


def apply_payment(debt: Debt, delta: Decimal) -> Debt:
    """
    Return a copy of debt with delta added to paid_amount.

    Positive delta records a payment, negative reverses one. The result
    is clamped to [0, total_amount]; out-of-range deltas are not errors.
    """
    paid = clamp(debt.paid_amount + Decimal(delta), ZERO, debt.total_amount)
    return debt.model_copy(update={"paid_amount": paid})


def portfolio(debts: Iterable[Debt]) -> DebtPortfolio:
    debts = list(debts)
    total_debt = sum((d.total_amount for d in debts), ZERO)
    total_paid = sum((d.paid_amount for d in debts), ZERO)
    return DebtPortfolio(
        total_debt=total_debt,
        total_paid=total_paid,
        remaining_debt=total_debt - total_paid,
        overall_progress=percent_of(total_paid, total_debt),
    )
