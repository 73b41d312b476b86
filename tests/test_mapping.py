"""Tests for the explicit record <-> sheet row mapping."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from jarbook.models import BankAccount, ColorTag, Debt, Expense, Income, IncomeType, Jar
from jarbook.services.storage import mapping


class TestExpenseRows:
    """Tests for expense rows."""

    def test_every_field_survives(self):
        expense = Expense(
            id="e1",
            name="Lunch",
            amount=Decimal("120.50"),
            category_id="food",
            sub_category_id="daily-food",
            date=datetime(2025, 1, 10, 12, 30),
            color=ColorTag.MINT,
            note="with team",
            custom_icon="https://example.com/icon.png",
        )
        row = mapping.expense_to_row(expense)
        assert len(row) == len(mapping.EXPENSE_COLUMNS)
        assert mapping.row_to_expense(row) == expense

    def test_optional_fields_are_blank_cells(self):
        expense = Expense(
            id="e1", name="Bus", amount=Decimal("15"),
            category_id="transport", date=datetime(2025, 1, 1),
        )
        row = mapping.expense_to_row(expense)
        assert row[4] == ""
        assert row[7] == ""
        restored = mapping.row_to_expense(row)
        assert restored.sub_category_id is None
        assert restored.note is None

    def test_short_row_uses_defaults(self):
        """Test that rows missing trailing cells still parse."""
        row = ["e1", "Bus", "15", "transport", "", "2025-01-01T00:00:00"]
        expense = mapping.row_to_expense(row)
        assert expense.color == ColorTag.PINK
        assert expense.custom_icon is None

    def test_offset_timestamp_becomes_naive_local(self):
        """Test that a hand-edited cell with an offset parses as naive local time."""
        row = ["e1", "Bus", "15", "transport", "", "2025-01-11T12:00:00+07:00"]
        expense = mapping.row_to_expense(row)
        aware = datetime(2025, 1, 11, 12, 0, tzinfo=timezone(timedelta(hours=7)))
        assert expense.date.tzinfo is None
        assert expense.date == aware.astimezone().replace(tzinfo=None)


class TestDebtRows:
    """Tests for debt rows."""

    def test_every_field_survives(self):
        debt = Debt(
            id="d1",
            name="Car",
            icon="🚗",
            total_amount=Decimal("500000"),
            paid_amount=Decimal("125000.75"),
            color=ColorTag.BLUE,
            custom_icon="data:image/png;base64,AAAA",
        )
        row = mapping.debt_to_row(debt)
        assert row[3] == "500000"
        assert mapping.row_to_debt(row) == debt


class TestJarRows:
    """Tests for jar rows."""

    def test_every_field_survives(self):
        jar = Jar(
            id="j1",
            name="Play",
            description="fun money",
            percentage=Decimal("12.5"),
            emoji="🎉",
            color=ColorTag.PURPLE,
            current_amount=Decimal("300"),
            target_amount=Decimal("1000"),
        )
        assert mapping.row_to_jar(mapping.jar_to_row(jar)) == jar

    def test_missing_target(self):
        jar = Jar(id="j1", name="Give", percentage=Decimal("5"))
        row = mapping.jar_to_row(jar)
        assert row[7] == ""
        assert mapping.row_to_jar(row).target_amount is None


class TestIncomeRows:
    """Tests for income rows."""

    def test_every_field_survives(self):
        income = Income(
            id="i1",
            name="Freelance",
            amount=Decimal("8000"),
            type=IncomeType.IRREGULAR,
            date=datetime(2025, 2, 1, 9, 0),
        )
        assert mapping.row_to_income(mapping.income_to_row(income)) == income


class TestBankAccountRows:
    """Tests for bank account rows."""

    def test_jar_ids_are_json(self):
        account = BankAccount(
            id="b1", name="KBank", jar_ids=["j1", "j2"], balance=Decimal("1500"),
        )
        row = mapping.bank_account_to_row(account)
        assert row[2] == '["j1", "j2"]'
        assert mapping.row_to_bank_account(row) == account

    def test_empty_jar_ids(self):
        account = mapping.row_to_bank_account(["b1", "KBank", "", "0"])
        assert account.jar_ids == []
