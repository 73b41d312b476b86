"""
Two-Stage Submission Validation

Every form submission (expense, debt, jar, income) arrives as a draft
with optional fields. It is checked in two stages before it may become
a stored record:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Value ranges (non-negative amounts, percentages in 0..100)

STAGE 2 - SEMANTIC VALIDATION:
- Catalog references (category and sub-category ids)
- Suspicious values (future dates, very large amounts)
- Over-allocated jars (advisory)

Only errors block a submission. Warnings are shown but never stop it.
Validation NEVER silently fixes issues; it reports them.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from jarbook.config import AppSettings, get_settings
from jarbook.engine.jars import total_allocated_percentage
from jarbook.engine.money import HUNDRED, ZERO
from jarbook.models.catalog import find_category, find_sub_category
from jarbook.models.records import (
    Debt,
    DebtDraft,
    Expense,
    ExpenseDraft,
    Income,
    IncomeDraft,
    Jar,
    JarDraft,
    ValidationIssue,
    ValidationResult,
)


def _missing(field: str, label: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="missing",
        message=f"{label} is required",
        severity="error",
    )


def _has_errors(issues: list[ValidationIssue]) -> bool:
    return any(issue.severity == "error" for issue in issues)


class SubmissionValidator:
    """
    Validates drafts and turns valid ones into records.

    Stage 2 only runs when stage 1 passes.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _result(
        self,
        schema_issues: list[ValidationIssue],
        semantic_stage,
    ) -> ValidationResult:
        schema_valid = not _has_errors(schema_issues)
        issues = list(schema_issues)
        semantic_valid = False
        if schema_valid:
            semantic_issues = semantic_stage()
            semantic_valid = not _has_errors(semantic_issues)
            issues.extend(semantic_issues)
        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=issues,
        )

    def _amount_warning(self, field: str, amount: Decimal) -> list[ValidationIssue]:
        limit = Decimal(str(self._settings.max_amount_warning))
        if amount > limit:
            return [ValidationIssue(
                field=field,
                issue_type="suspicious_value",
                message=f"Amount ({amount:,.2f}) seems unusually high",
                severity="warning",
            )]
        return []

    # -- expenses ------------------------------------------------------------

    def validate_expense(self, draft: ExpenseDraft) -> ValidationResult:
        issues = []
        if not draft.name:
            issues.append(_missing("name", "Name"))
        if draft.amount is None:
            issues.append(_missing("amount", "Amount"))
        elif draft.amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount cannot be negative",
                severity="error",
            ))
        if not draft.category_id:
            issues.append(_missing("category_id", "Category"))

        return self._result(issues, lambda: self._expense_semantics(draft))

    def _expense_semantics(self, draft: ExpenseDraft) -> list[ValidationIssue]:
        issues = []

        category = find_category(draft.category_id)
        if category is None:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="unknown_reference",
                message=f"Unknown category: {draft.category_id}",
                severity="error",
            ))
        elif draft.sub_category_id and find_sub_category(
            draft.category_id, draft.sub_category_id
        ) is None:
            issues.append(ValidationIssue(
                field="sub_category_id",
                issue_type="unknown_reference",
                message=(
                    f"Sub-category {draft.sub_category_id} does not belong "
                    f"to {category.name}"
                ),
                severity="error",
            ))

        if draft.date is not None:
            tolerance = timedelta(days=self._settings.future_date_tolerance_days)
            now = datetime.now(draft.date.tzinfo)
            if draft.date > now + tolerance:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message=f"Date ({draft.date:%Y-%m-%d}) is in the future",
                    severity="warning",
                ))

        issues.extend(self._amount_warning("amount", draft.amount))
        return issues

    def build_expense(
        self,
        draft: ExpenseDraft,
        record_id: Optional[str] = None,
    ) -> Expense:
        """
        Turn a validated draft into an Expense.

        A new expense gets a fresh id; an edit keeps record_id. A draft
        without a date is dated now.
        """
        fields = dict(
            name=draft.name,
            amount=draft.amount,
            category_id=draft.category_id,
            sub_category_id=draft.sub_category_id or None,
            date=draft.date or datetime.now(),
            color=draft.color,
            note=draft.note or None,
            custom_icon=draft.custom_icon or None,
        )
        if record_id:
            fields["id"] = record_id
        return Expense(**fields)

    # -- debts ---------------------------------------------------------------

    def validate_debt(self, draft: DebtDraft) -> ValidationResult:
        issues = []
        if not draft.name:
            issues.append(_missing("name", "Name"))
        if draft.total_amount is None:
            issues.append(_missing("total_amount", "Total amount"))
        elif draft.total_amount <= 0:
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="invalid_value",
                message="Total amount must be greater than zero",
                severity="error",
            ))
        if draft.paid_amount is not None and draft.paid_amount < 0:
            issues.append(ValidationIssue(
                field="paid_amount",
                issue_type="invalid_value",
                message="Paid amount cannot be negative",
                severity="error",
            ))

        return self._result(issues, lambda: self._debt_semantics(draft))

    def _debt_semantics(self, draft: DebtDraft) -> list[ValidationIssue]:
        issues = []
        if draft.paid_amount is not None and draft.paid_amount > draft.total_amount:
            issues.append(ValidationIssue(
                field="paid_amount",
                issue_type="suspicious_value",
                message="Paid amount is more than the total; progress will show 100%",
                severity="warning",
            ))
        issues.extend(self._amount_warning("total_amount", draft.total_amount))
        return issues

    def build_debt(
        self,
        draft: DebtDraft,
        record_id: Optional[str] = None,
        paid_amount: Decimal = ZERO,
    ) -> Debt:
        """paid_amount is used when the draft leaves it blank."""
        fields = dict(
            name=draft.name,
            icon=draft.icon or "💳",
            total_amount=draft.total_amount,
            paid_amount=draft.paid_amount if draft.paid_amount is not None else paid_amount,
            color=draft.color,
            custom_icon=draft.custom_icon or None,
        )
        if record_id:
            fields["id"] = record_id
        return Debt(**fields)

    # -- jars ----------------------------------------------------------------

    def validate_jar(
        self,
        draft: JarDraft,
        other_jars: Iterable[Jar] = (),
    ) -> ValidationResult:
        """
        other_jars are the jars that stay alongside this one; they are
        only used for the advisory over-allocation warning.
        """
        issues = []
        if not draft.name:
            issues.append(_missing("name", "Name"))
        if draft.percentage is None:
            issues.append(_missing("percentage", "Percentage"))
        elif not ZERO <= draft.percentage <= HUNDRED:
            issues.append(ValidationIssue(
                field="percentage",
                issue_type="invalid_value",
                message="Percentage must be between 0 and 100",
                severity="error",
            ))
        if draft.target_amount is not None and draft.target_amount < 0:
            issues.append(ValidationIssue(
                field="target_amount",
                issue_type="invalid_value",
                message="Target amount cannot be negative",
                severity="error",
            ))

        return self._result(issues, lambda: self._jar_semantics(draft, other_jars))

    def _jar_semantics(self, draft: JarDraft, other_jars: Iterable[Jar]) -> list[ValidationIssue]:
        total = total_allocated_percentage(other_jars) + draft.percentage
        if total > HUNDRED:
            return [ValidationIssue(
                field="percentage",
                issue_type="over_allocated",
                message=f"Jars would add up to {total}% of regular income",
                severity="warning",
            )]
        return []

    def build_jar(
        self,
        draft: JarDraft,
        record_id: Optional[str] = None,
        current_amount: Decimal = ZERO,
    ) -> Jar:
        """current_amount carries over on edit; new jars start empty."""
        fields = dict(
            name=draft.name,
            description=draft.description or "",
            percentage=draft.percentage,
            emoji=draft.emoji or "💰",
            color=draft.color,
            current_amount=current_amount,
            target_amount=draft.target_amount,
        )
        if record_id:
            fields["id"] = record_id
        return Jar(**fields)

    # -- incomes -------------------------------------------------------------

    def validate_income(self, draft: IncomeDraft) -> ValidationResult:
        issues = []
        if not draft.name:
            issues.append(_missing("name", "Name"))
        if draft.amount is None:
            issues.append(_missing("amount", "Amount"))
        elif draft.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))

        return self._result(issues, lambda: self._amount_warning("amount", draft.amount))

    def build_income(self, draft: IncomeDraft) -> Income:
        return Income(name=draft.name, amount=draft.amount, type=draft.type)
