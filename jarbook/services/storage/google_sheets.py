"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the remote backend because:
1. The user can view and fix their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions; bulk replaces clear and rewrite a worksheet
- Limited query capabilities (we filter in Python)

Each collection gets its own worksheet with a snake_case header row.
Rows are converted through the explicit mapping in `mapping.py`.
"""

import json
from typing import Callable, Optional, TypeVar
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from jarbook.config import get_settings
from jarbook.models.audit import AuditEvent, AuditEventType, AuditSeverity
from jarbook.models.records import BankAccount, Debt, Expense, Income, Jar
from jarbook.services.storage import mapping
from jarbook.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    FinanceStorageInterface,
    NotFoundError,
    StorageError,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

remote_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @remote_retry
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_sheet(self, title: str, columns: list[str], rows: int = 1000) -> gspread.Worksheet:
        """Get or create a worksheet with the given header."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def expenses_sheet(self) -> gspread.Worksheet:
        return self.get_sheet(self._settings.expenses_sheet_name, mapping.EXPENSE_COLUMNS)

    def debts_sheet(self) -> gspread.Worksheet:
        return self.get_sheet(self._settings.debts_sheet_name, mapping.DEBT_COLUMNS)

    def jars_sheet(self) -> gspread.Worksheet:
        return self.get_sheet(self._settings.jars_sheet_name, mapping.JAR_COLUMNS)

    def incomes_sheet(self) -> gspread.Worksheet:
        return self.get_sheet(self._settings.incomes_sheet_name, mapping.INCOME_COLUMNS)

    def bank_accounts_sheet(self) -> gspread.Worksheet:
        return self.get_sheet(
            self._settings.bank_accounts_sheet_name, mapping.BANK_ACCOUNT_COLUMNS
        )

    def audit_sheet(self) -> gspread.Worksheet:
        return self.get_sheet(
            self._settings.audit_sheet_name, mapping.AUDIT_COLUMNS, rows=5000
        )


class GoogleSheetsFinanceStorage(FinanceStorageInterface):
    """
    Google Sheets implementation of the persistence collaborator.

    One record per row; the first row of every worksheet is the header.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    # -- generic row helpers -------------------------------------------------

    def _read_all(
        self,
        sheet: gspread.Worksheet,
        parse: Callable[[list], T],
    ) -> list[T]:
        records = []
        for row in sheet.get_all_values()[1:]:  # Skip header
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                records.append(parse(row))
            except Exception as e:
                # Skip malformed rows
                logger.warning("malformed_row_skipped", sheet=sheet.title, error=str(e))
        return records

    def _find_row(self, sheet: gspread.Worksheet, record_id: str) -> Optional[int]:
        for idx, row in enumerate(sheet.get_all_values()[1:], start=2):  # Row 1 is header
            if row and row[0] == record_id:
                return idx
        return None

    def _update_row(self, sheet: gspread.Worksheet, record_id: str, new_row: list) -> None:
        idx = self._find_row(sheet, record_id)
        if idx is None:
            raise NotFoundError(f"Record not found: {record_id}")
        sheet.update(range_name=f"A{idx}", values=[new_row], value_input_option="RAW")

    def _delete_row(self, sheet: gspread.Worksheet, record_id: str) -> bool:
        idx = self._find_row(sheet, record_id)
        if idx is None:
            return False
        sheet.delete_rows(idx)
        return True

    def _rewrite(self, sheet: gspread.Worksheet, columns: list[str], rows: list[list]) -> None:
        sheet.clear()
        sheet.update(range_name="A1", values=[columns, *rows], value_input_option="RAW")

    # -- reads ---------------------------------------------------------------

    @remote_retry
    async def list_expenses(self) -> list[Expense]:
        try:
            expenses = self._read_all(self._client.expenses_sheet(), mapping.row_to_expense)
            # Sort by date descending (newest first)
            expenses.sort(key=lambda e: e.date, reverse=True)
            return expenses
        except Exception as e:
            raise StorageError(f"Failed to list expenses: {e}")

    @remote_retry
    async def list_debts(self) -> list[Debt]:
        try:
            return self._read_all(self._client.debts_sheet(), mapping.row_to_debt)
        except Exception as e:
            raise StorageError(f"Failed to list debts: {e}")

    @remote_retry
    async def list_jars(self) -> list[Jar]:
        try:
            return self._read_all(self._client.jars_sheet(), mapping.row_to_jar)
        except Exception as e:
            raise StorageError(f"Failed to list jars: {e}")

    @remote_retry
    async def list_incomes(self) -> list[Income]:
        try:
            return self._read_all(self._client.incomes_sheet(), mapping.row_to_income)
        except Exception as e:
            raise StorageError(f"Failed to list incomes: {e}")

    @remote_retry
    async def list_bank_accounts(self) -> list[BankAccount]:
        try:
            return self._read_all(
                self._client.bank_accounts_sheet(), mapping.row_to_bank_account
            )
        except Exception as e:
            raise StorageError(f"Failed to list bank accounts: {e}")

    # -- expenses ------------------------------------------------------------

    @remote_retry
    async def create_expense(self, expense: Expense) -> Expense:
        try:
            sheet = self._client.expenses_sheet()
            sheet.append_row(mapping.expense_to_row(expense), value_input_option="RAW")
            return expense
        except Exception as e:
            raise StorageError(f"Failed to save expense: {e}")

    async def update_expense(self, expense: Expense) -> Expense:
        try:
            self._update_row(
                self._client.expenses_sheet(), expense.id, mapping.expense_to_row(expense)
            )
            return expense
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update expense: {e}")

    async def delete_expense(self, expense_id: str) -> bool:
        try:
            return self._delete_row(self._client.expenses_sheet(), expense_id)
        except Exception as e:
            raise StorageError(f"Failed to delete expense: {e}")

    # -- debts ---------------------------------------------------------------

    @remote_retry
    async def create_debt(self, debt: Debt) -> Debt:
        try:
            sheet = self._client.debts_sheet()
            sheet.append_row(mapping.debt_to_row(debt), value_input_option="RAW")
            return debt
        except Exception as e:
            raise StorageError(f"Failed to save debt: {e}")

    async def update_debt(self, debt: Debt) -> Debt:
        try:
            self._update_row(self._client.debts_sheet(), debt.id, mapping.debt_to_row(debt))
            return debt
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update debt: {e}")

    async def delete_debt(self, debt_id: str) -> bool:
        try:
            return self._delete_row(self._client.debts_sheet(), debt_id)
        except Exception as e:
            raise StorageError(f"Failed to delete debt: {e}")

    # -- bulk collections ----------------------------------------------------

    @remote_retry
    async def replace_jars(self, jars: list[Jar]) -> None:
        try:
            self._rewrite(
                self._client.jars_sheet(),
                mapping.JAR_COLUMNS,
                [mapping.jar_to_row(j) for j in jars],
            )
        except Exception as e:
            raise StorageError(f"Failed to replace jars: {e}")

    @remote_retry
    async def replace_incomes(self, incomes: list[Income]) -> None:
        try:
            self._rewrite(
                self._client.incomes_sheet(),
                mapping.INCOME_COLUMNS,
                [mapping.income_to_row(i) for i in incomes],
            )
        except Exception as e:
            raise StorageError(f"Failed to replace incomes: {e}")

    @remote_retry
    async def replace_bank_accounts(self, accounts: list[BankAccount]) -> None:
        try:
            self._rewrite(
                self._client.bank_accounts_sheet(),
                mapping.BANK_ACCOUNT_COLUMNS,
                [mapping.bank_account_to_row(a) for a in accounts],
            )
        except Exception as e:
            raise StorageError(f"Failed to replace bank accounts: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        r = mapping.RowReader(row)
        return AuditEvent(
            event_id=UUID(r.get(0)),
            timestamp=r.utc_timestamp(1),
            event_type=AuditEventType(r.get(2)),
            severity=AuditSeverity(r.get(3)),
            entity_type=r.optional(4),
            entity_id=r.optional(5),
            correlation_id=UUID(r.get(6)) if r.get(6) else None,
            description=r.get(7),
            details=json.loads(r.get(8)) if r.get(8) else {},
            error_message=r.optional(9),
            is_user_action=r.get(10).lower() == "true",
        )

    @remote_retry
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging must not break the main flow
            logger.warning("audit_append_failed", error=str(e))
            return False

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        try:
            sheet = self._client.audit_sheet()
            all_rows = sheet.get_all_values()[1:]

            events = []
            for row in all_rows:
                if row and row[0]:
                    try:
                        events.append(self._row_to_event(row))
                    except Exception:
                        continue

            # Sort newest first
            events.sort(key=lambda e: e.timestamp, reverse=True)
            return events[:limit]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")
