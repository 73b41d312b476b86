"""Tests for the debt progress model."""

import pytest
from decimal import Decimal

from jarbook.engine.debts import apply_payment, portfolio, progress_percent, remaining
from jarbook.models import Debt


def make_debt(total, paid="0", name="Loan"):
    return Debt(name=name, total_amount=Decimal(total), paid_amount=Decimal(paid))


class TestApplyPayment:
    """Tests for bounded payments."""

    def test_payment_then_overshoot_clamps(self):
        """Test a payment followed by one larger than what is left."""
        debt = make_debt("10000", "3000")
        debt = apply_payment(debt, Decimal("500"))
        assert debt.paid_amount == Decimal("3500")
        debt = apply_payment(debt, Decimal("8000"))
        assert debt.paid_amount == Decimal("10000")

    @pytest.mark.parametrize(
        "paid,delta,expected",
        [
            ("0", "0", "0"),
            ("0", "100", "100"),
            ("900", "100", "1000"),
            ("900", "5000", "1000"),
            ("1000", "1", "1000"),
        ],
    )
    def test_non_negative_deltas(self, paid, delta, expected):
        debt = make_debt("1000", paid)
        assert apply_payment(debt, Decimal(delta)).paid_amount == Decimal(expected)

    def test_negative_delta_reverses(self):
        debt = make_debt("1000", "300")
        assert apply_payment(debt, Decimal("-100")).paid_amount == Decimal("200")

    def test_negative_delta_clamps_at_zero(self):
        debt = make_debt("1000", "300")
        assert apply_payment(debt, Decimal("-500")).paid_amount == Decimal("0")

    def test_returns_new_instance(self):
        """Test that the input debt is left untouched."""
        debt = make_debt("1000", "300")
        paid = apply_payment(debt, Decimal("100"))
        assert debt.paid_amount == Decimal("300")
        assert paid.id == debt.id
        assert paid.name == debt.name


class TestProgress:
    """Tests for payoff progress."""

    def test_remaining(self):
        assert remaining(make_debt("1000", "250")) == Decimal("750")

    def test_progress_percent(self):
        assert progress_percent(make_debt("1000", "250")) == Decimal("25")

    def test_zero_total(self):
        """Test that a zero-total debt reports 0%."""
        assert progress_percent(make_debt("0")) == Decimal("0")

    def test_overpaid_record_clamps_to_100(self):
        """Test that an edited record paid past its total still shows 100%."""
        assert progress_percent(make_debt("100", "150")) == Decimal("100")


class TestPortfolio:
    """Tests for totals across debts."""

    def test_portfolio(self):
        result = portfolio([make_debt("10000", "2500"), make_debt("5000", "5000")])
        assert result.total_debt == Decimal("15000")
        assert result.total_paid == Decimal("7500")
        assert result.remaining_debt == Decimal("7500")
        assert result.overall_progress == Decimal("50")

    def test_empty_portfolio(self):
        result = portfolio([])
        assert result.total_debt == Decimal("0")
        assert result.overall_progress == Decimal("0")
