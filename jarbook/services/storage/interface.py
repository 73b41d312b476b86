"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep data on local disk or in a remote Google Sheet
2. Use a temporary directory for testing
3. Keep the engine and the orchestrator unaware of where data lives

The interface is intentionally simple - we're not building a full ORM.
Expenses and debts get per-record CRUD; jars, incomes and bank accounts
are always written back as a whole collection.
"""

from abc import ABC, abstractmethod

from jarbook.models.audit import AuditEvent
from jarbook.models.records import BankAccount, Debt, Expense, Income, Jar


class FinanceStorageInterface(ABC):
    """
    Abstract interface for the persistence collaborator.

    Any storage implementation (local JSON, Google Sheets, etc.)
    must implement these methods. Writes are last-write-wins.
    """

    # -- reads ---------------------------------------------------------------

    @abstractmethod
    async def list_expenses(self) -> list[Expense]:
        """
        All expenses, newest first.

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def list_debts(self) -> list[Debt]:
        pass

    @abstractmethod
    async def list_jars(self) -> list[Jar]:
        pass

    @abstractmethod
    async def list_incomes(self) -> list[Income]:
        pass

    @abstractmethod
    async def list_bank_accounts(self) -> list[BankAccount]:
        pass

    # -- expenses ------------------------------------------------------------

    @abstractmethod
    async def create_expense(self, expense: Expense) -> Expense:
        """
        Persist a new expense.

        Args:
            expense: The expense, with its id already assigned

        Returns:
            The stored expense

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def update_expense(self, expense: Expense) -> Expense:
        """
        Replace every field of an existing expense except its id.

        Raises:
            StorageError: If update fails
            NotFoundError: If the expense doesn't exist
        """
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: str) -> bool:
        """
        Delete an expense by ID.

        Returns:
            True if a record was removed, False if none matched
        """
        pass

    # -- debts ---------------------------------------------------------------

    @abstractmethod
    async def create_debt(self, debt: Debt) -> Debt:
        pass

    @abstractmethod
    async def update_debt(self, debt: Debt) -> Debt:
        """
        Replace an existing debt.

        Raises:
            NotFoundError: If the debt doesn't exist
        """
        pass

    @abstractmethod
    async def delete_debt(self, debt_id: str) -> bool:
        pass

    # -- bulk collections ----------------------------------------------------

    @abstractmethod
    async def replace_jars(self, jars: list[Jar]) -> None:
        """Overwrite the whole jar collection."""
        pass

    @abstractmethod
    async def replace_incomes(self, incomes: list[Income]) -> None:
        pass

    @abstractmethod
    async def replace_bank_accounts(self, accounts: list[BankAccount]) -> None:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
