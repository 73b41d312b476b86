"""
Record <-> spreadsheet row mapping.

Remote rows are flat lists of strings under a snake_case header.
Every field of every record is converted explicitly in both
directions; there is no generic reflection-based reshaping.

Empty cells stand for None. Decimals are written with str() so they
round-trip exactly.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from jarbook.models.records import (
    BankAccount,
    ColorTag,
    Debt,
    Expense,
    Income,
    IncomeType,
    Jar,
)


EXPENSE_COLUMNS = [
    "id",
    "name",
    "amount",
    "category_id",
    "sub_category_id",
    "date",
    "color",
    "note",
    "custom_icon",
]

DEBT_COLUMNS = [
    "id",
    "name",
    "icon",
    "total_amount",
    "paid_amount",
    "color",
    "custom_icon",
]

JAR_COLUMNS = [
    "id",
    "name",
    "description",
    "percentage",
    "emoji",
    "color",
    "current_amount",
    "target_amount",
]

INCOME_COLUMNS = [
    "id",
    "name",
    "amount",
    "type",
    "date",
]

BANK_ACCOUNT_COLUMNS = [
    "id",
    "name",
    "jar_ids_json",
    "balance",
]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


class RowReader:
    """Positional access to a sheet row that tolerates short rows."""

    def __init__(self, row: list):
        self._row = row

    def get(self, index: int, default: str = "") -> str:
        try:
            return self._row[index] if self._row[index] else default
        except IndexError:
            return default

    def optional(self, index: int) -> Optional[str]:
        return self.get(index) or None

    def decimal(self, index: int) -> Decimal:
        return Decimal(self.get(index, "0"))

    def optional_decimal(self, index: int) -> Optional[Decimal]:
        value = self.get(index)
        return Decimal(value) if value else None

    def timestamp(self, index: int) -> datetime:
        """Parse an ISO cell; offsets are converted to naive local time."""
        value = datetime.fromisoformat(self.get(index))
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value

    def utc_timestamp(self, index: int) -> datetime:
        """Parse an audit cell; naive values are taken as UTC."""
        value = datetime.fromisoformat(self.get(index))
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def _opt(value: Optional[object]) -> str:
    return "" if value is None else str(value)


# -- expenses ----------------------------------------------------------------

def expense_to_row(expense: Expense) -> list:
    return [
        expense.id,
        expense.name,
        str(expense.amount),
        expense.category_id,
        _opt(expense.sub_category_id),
        expense.date.isoformat(),
        expense.color.value,
        _opt(expense.note),
        _opt(expense.custom_icon),
    ]


def row_to_expense(row: list) -> Expense:
    r = RowReader(row)
    return Expense(
        id=r.get(0),
        name=r.get(1),
        amount=r.decimal(2),
        category_id=r.get(3),
        sub_category_id=r.optional(4),
        date=r.timestamp(5),
        color=ColorTag(r.get(6, ColorTag.PINK.value)),
        note=r.optional(7),
        custom_icon=r.optional(8),
    )


# -- debts -------------------------------------------------------------------

def debt_to_row(debt: Debt) -> list:
    return [
        debt.id,
        debt.name,
        debt.icon,
        str(debt.total_amount),
        str(debt.paid_amount),
        debt.color.value,
        _opt(debt.custom_icon),
    ]


def row_to_debt(row: list) -> Debt:
    r = RowReader(row)
    return Debt(
        id=r.get(0),
        name=r.get(1),
        icon=r.get(2, "💳"),
        total_amount=r.decimal(3),
        paid_amount=r.decimal(4),
        color=ColorTag(r.get(5, ColorTag.PINK.value)),
        custom_icon=r.optional(6),
    )


# -- jars --------------------------------------------------------------------

def jar_to_row(jar: Jar) -> list:
    return [
        jar.id,
        jar.name,
        jar.description,
        str(jar.percentage),
        jar.emoji,
        jar.color.value,
        str(jar.current_amount),
        _opt(jar.target_amount),
    ]


def row_to_jar(row: list) -> Jar:
    r = RowReader(row)
    return Jar(
        id=r.get(0),
        name=r.get(1),
        description=r.get(2),
        percentage=r.decimal(3),
        emoji=r.get(4, "💰"),
        color=ColorTag(r.get(5, ColorTag.PINK.value)),
        current_amount=r.decimal(6),
        target_amount=r.optional_decimal(7),
    )


# -- incomes -----------------------------------------------------------------

def income_to_row(income: Income) -> list:
    return [
        income.id,
        income.name,
        str(income.amount),
        income.type.value,
        income.date.isoformat(),
    ]


def row_to_income(row: list) -> Income:
    r = RowReader(row)
    return Income(
        id=r.get(0),
        name=r.get(1),
        amount=r.decimal(2),
        type=IncomeType(r.get(3, IncomeType.REGULAR.value)),
        date=r.timestamp(4),
    )


# -- bank accounts -----------------------------------------------------------

def bank_account_to_row(account: BankAccount) -> list:
    return [
        account.id,
        account.name,
        json.dumps(account.jar_ids),
        str(account.balance),
    ]


def row_to_bank_account(row: list) -> BankAccount:
    r = RowReader(row)
    return BankAccount(
        id=r.get(0),
        name=r.get(1),
        jar_ids=json.loads(r.get(2, "[]")),
        balance=r.decimal(3),
    )
