"""
Tests for the Google Sheets backend.

The gspread worksheet is replaced by an in-memory fake; no network.
"""

import asyncio
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from jarbook.models import Debt, Expense, Income, Jar
from jarbook.models.audit import AuditEventBuilder
from jarbook.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsFinanceStorage,
    NotFoundError,
)
from jarbook.services.storage import mapping


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the storage classes."""

    def __init__(self, title, columns):
        self.title = title
        self.rows = [list(columns)]

    def get_all_values(self):
        return [list(r) for r in self.rows]

    def append_row(self, row, value_input_option=None):
        self.rows.append(list(row))

    def update(self, range_name=None, values=None, value_input_option=None):
        start = int(range_name[1:]) - 1
        for offset, row in enumerate(values):
            idx = start + offset
            if idx < len(self.rows):
                self.rows[idx] = list(row)
            else:
                self.rows.append(list(row))

    def delete_rows(self, index):
        del self.rows[index - 1]

    def clear(self):
        self.rows = []


class FakeClient:
    def __init__(self):
        self.sheets = {
            "expenses": FakeWorksheet("Expenses", mapping.EXPENSE_COLUMNS),
            "debts": FakeWorksheet("Debts", mapping.DEBT_COLUMNS),
            "jars": FakeWorksheet("Jars", mapping.JAR_COLUMNS),
            "incomes": FakeWorksheet("Incomes", mapping.INCOME_COLUMNS),
            "bank_accounts": FakeWorksheet("BankAccounts", mapping.BANK_ACCOUNT_COLUMNS),
            "audit": FakeWorksheet("AuditLog", mapping.AUDIT_COLUMNS),
        }

    def expenses_sheet(self):
        return self.sheets["expenses"]

    def debts_sheet(self):
        return self.sheets["debts"]

    def jars_sheet(self):
        return self.sheets["jars"]

    def incomes_sheet(self):
        return self.sheets["incomes"]

    def bank_accounts_sheet(self):
        return self.sheets["bank_accounts"]

    def audit_sheet(self):
        return self.sheets["audit"]


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def storage(client):
    return GoogleSheetsFinanceStorage(client)


def make_expense(name, date):
    return Expense(name=name, amount=Decimal("10"), category_id="food", date=date)


class TestSheetsExpenses:
    """Tests for expense rows in the sheet."""

    def test_create_and_list_newest_first(self, storage):
        asyncio.run(storage.create_expense(make_expense("Old", datetime(2025, 1, 1))))
        asyncio.run(storage.create_expense(make_expense("New", datetime(2025, 1, 5))))
        names = [e.name for e in asyncio.run(storage.list_expenses())]
        assert names == ["New", "Old"]

    def test_header_row_is_kept(self, storage, client):
        asyncio.run(storage.create_expense(make_expense("A", datetime(2025, 1, 1))))
        assert client.sheets["expenses"].rows[0] == mapping.EXPENSE_COLUMNS

    def test_update(self, storage):
        expense = make_expense("A", datetime(2025, 1, 1))
        asyncio.run(storage.create_expense(expense))
        asyncio.run(storage.update_expense(expense.model_copy(update={"name": "B"})))
        assert asyncio.run(storage.list_expenses())[0].name == "B"

    def test_update_unknown_raises_not_found(self, storage):
        with pytest.raises(NotFoundError):
            asyncio.run(storage.update_expense(make_expense("A", datetime(2025, 1, 1))))

    def test_delete(self, storage):
        expense = make_expense("A", datetime(2025, 1, 1))
        asyncio.run(storage.create_expense(expense))
        assert asyncio.run(storage.delete_expense(expense.id)) is True
        assert asyncio.run(storage.delete_expense(expense.id)) is False
        assert asyncio.run(storage.list_expenses()) == []

    def test_malformed_row_is_skipped(self, storage, client):
        client.sheets["expenses"].rows.append(["bad", "x", "not-a-number"])
        asyncio.run(storage.create_expense(make_expense("A", datetime(2025, 1, 1))))
        assert [e.name for e in asyncio.run(storage.list_expenses())] == ["A"]

    def test_mixed_offset_and_naive_dates_sort(self, storage, client):
        """Test that a row edited with a UTC offset sorts alongside naive rows."""
        sheet = client.sheets["expenses"]
        sheet.append_row(["e1", "Naive", "10", "food", "", "2025-01-10T12:00:00"])
        sheet.append_row(["e2", "Offset", "10", "food", "", "2025-02-11T12:00:00+07:00"])
        expenses = asyncio.run(storage.list_expenses())
        assert [e.name for e in expenses] == ["Offset", "Naive"]
        assert all(e.date.tzinfo is None for e in expenses)


class TestSheetsCollections:
    """Tests for debts and the bulk-replaced collections."""

    def test_debt_round_trip(self, storage):
        debt = Debt(name="Car", total_amount=Decimal("1000"), paid_amount=Decimal("100"))
        asyncio.run(storage.create_debt(debt))
        assert asyncio.run(storage.list_debts()) == [debt]

    def test_replace_jars_rewrites_sheet(self, storage, client):
        jars = [Jar(name="A", percentage=Decimal("50")), Jar(name="B", percentage=Decimal("50"))]
        asyncio.run(storage.replace_jars(jars))
        asyncio.run(storage.replace_jars(jars[1:]))
        assert client.sheets["jars"].rows[0] == mapping.JAR_COLUMNS
        assert [j.name for j in asyncio.run(storage.list_jars())] == ["B"]

    def test_replace_incomes(self, storage):
        incomes = [Income(name="Salary", amount=Decimal("30000"))]
        asyncio.run(storage.replace_incomes(incomes))
        assert asyncio.run(storage.list_incomes()) == incomes


class TestSheetsAudit:
    """Tests for the append-only audit sheet."""

    def test_recent_events_newest_first(self, client):
        audit = GoogleSheetsAuditStorage(client)
        for entity_id, day in [("e1", 1), ("d1", 2)]:
            event = AuditEventBuilder.record_mutated("expense", "created", entity_id, uuid4())
            asyncio.run(audit.append_event(event.model_copy(
                update={"timestamp": datetime(2025, 1, day, tzinfo=timezone.utc)}
            )))

        events = asyncio.run(audit.get_recent_events(limit=10))
        assert [e.entity_id for e in events] == ["d1", "e1"]
        assert len(asyncio.run(audit.get_recent_events(limit=1))) == 1

    def test_naive_audit_rows_are_read_as_utc(self, client):
        """Test that rows written without an offset still sort with newer ones."""
        audit = GoogleSheetsAuditStorage(client)
        legacy = AuditEventBuilder.record_mutated("expense", "created", "old", uuid4())
        row = legacy.to_sheets_row()
        row[1] = "2020-01-01T00:00:00"
        client.sheets["audit"].append_row(row)
        asyncio.run(audit.append_event(
            AuditEventBuilder.record_mutated("expense", "created", "new", uuid4())
        ))

        events = asyncio.run(audit.get_recent_events())
        assert [e.entity_id for e in events] == ["new", "old"]
        assert events[1].timestamp.tzinfo is not None
