"""Tests for two-stage submission validation."""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from jarbook.config import AppSettings
from jarbook.models import DebtDraft, ExpenseDraft, IncomeDraft, IncomeType, Jar, JarDraft
from jarbook.validation import SubmissionValidator


@pytest.fixture
def validator():
    return SubmissionValidator(AppSettings())


def expense_draft(**overrides):
    fields = dict(
        name="Lunch",
        amount=Decimal("120"),
        category_id="food",
        date=datetime(2025, 1, 10),
    )
    fields.update(overrides)
    return ExpenseDraft(**fields)


class TestExpenseValidation:
    """Tests for expense drafts."""

    def test_valid_draft(self, validator):
        result = validator.validate_expense(expense_draft())
        assert result.is_valid
        assert result.issues == []

    @pytest.mark.parametrize("field", ["name", "amount", "category_id"])
    def test_required_fields(self, validator, field):
        result = validator.validate_expense(expense_draft(**{field: None}))
        assert not result.schema_valid
        assert any(i.field == field and i.issue_type == "missing" for i in result.issues)

    def test_blank_name_is_missing(self, validator):
        """Test that a whitespace name counts as missing."""
        result = validator.validate_expense(expense_draft(name="   "))
        assert not result.is_valid

    def test_negative_amount(self, validator):
        result = validator.validate_expense(expense_draft(amount=Decimal("-1")))
        assert not result.is_valid

    def test_zero_amount_is_allowed(self, validator):
        assert validator.validate_expense(expense_draft(amount=Decimal("0"))).is_valid

    def test_unknown_category(self, validator):
        result = validator.validate_expense(expense_draft(category_id="nope"))
        assert result.schema_valid
        assert not result.semantic_valid

    def test_sub_category_must_match(self, validator):
        result = validator.validate_expense(
            expense_draft(category_id="transport", sub_category_id="daily-food")
        )
        assert not result.is_valid
        assert result.issues[0].field == "sub_category_id"

    def test_semantic_stage_skipped_on_schema_errors(self, validator):
        result = validator.validate_expense(expense_draft(name=None, category_id="nope"))
        assert not result.schema_valid
        assert all(i.field != "category_id" for i in result.issues)

    def test_future_date_warns(self, validator):
        result = validator.validate_expense(
            expense_draft(date=datetime.now() + timedelta(days=30))
        )
        assert result.is_valid
        assert result.warnings

    def test_large_amount_warns(self, validator):
        result = validator.validate_expense(expense_draft(amount=Decimal("5000000")))
        assert result.is_valid
        assert any(i.issue_type == "suspicious_value" for i in result.issues)

    def test_build_expense_new_and_edit(self, validator):
        draft = expense_draft(note="", sub_category_id="daily-food")
        created = validator.build_expense(draft)
        edited = validator.build_expense(draft, record_id="e1")
        assert created.id != "e1"
        assert edited.id == "e1"
        assert created.note is None
        assert created.sub_category_id == "daily-food"

    def test_build_expense_defaults_date(self, validator):
        before = datetime.now()
        expense = validator.build_expense(expense_draft(date=None))
        assert expense.date >= before


class TestDebtValidation:
    """Tests for debt drafts."""

    def test_valid(self, validator):
        draft = DebtDraft(name="Car", total_amount=Decimal("1000"))
        assert validator.validate_debt(draft).is_valid

    def test_total_must_be_positive(self, validator):
        assert not validator.validate_debt(DebtDraft(name="Car", total_amount=Decimal("0"))).is_valid
        assert not validator.validate_debt(DebtDraft(name="Car")).is_valid

    def test_overpaid_warns(self, validator):
        draft = DebtDraft(name="Car", total_amount=Decimal("100"), paid_amount=Decimal("150"))
        result = validator.validate_debt(draft)
        assert result.is_valid
        assert result.warnings

    def test_build_debt_keeps_paid_amount(self, validator):
        draft = DebtDraft(name="Car", total_amount=Decimal("1000"))
        debt = validator.build_debt(draft, record_id="d1", paid_amount=Decimal("300"))
        assert debt.id == "d1"
        assert debt.paid_amount == Decimal("300")


class TestJarValidation:
    """Tests for jar drafts."""

    def test_valid(self, validator):
        assert validator.validate_jar(JarDraft(name="Play", percentage=Decimal("10"))).is_valid

    def test_percentage_range(self, validator):
        assert not validator.validate_jar(JarDraft(name="X", percentage=Decimal("120"))).is_valid
        assert not validator.validate_jar(JarDraft(name="X")).is_valid

    def test_over_allocation_is_only_a_warning(self, validator):
        others = [Jar(name="Big", percentage=Decimal("95"))]
        result = validator.validate_jar(JarDraft(name="X", percentage=Decimal("10")), others)
        assert result.is_valid
        assert result.issues[0].issue_type == "over_allocated"

    def test_build_jar_carries_current_amount(self, validator):
        jar = validator.build_jar(
            JarDraft(name="X", percentage=Decimal("10")),
            record_id="j1",
            current_amount=Decimal("250"),
        )
        assert jar.id == "j1"
        assert jar.current_amount == Decimal("250")


class TestIncomeValidation:
    """Tests for income drafts."""

    def test_valid(self, validator):
        draft = IncomeDraft(name="Salary", amount=Decimal("30000"))
        assert validator.validate_income(draft).is_valid

    def test_amount_must_be_positive(self, validator):
        assert not validator.validate_income(IncomeDraft(name="X", amount=Decimal("0"))).is_valid

    def test_build_income(self, validator):
        draft = IncomeDraft(name="Gig", amount=Decimal("500"), type=IncomeType.IRREGULAR)
        income = validator.build_income(draft)
        assert income.type == IncomeType.IRREGULAR
