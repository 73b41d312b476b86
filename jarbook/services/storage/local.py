"""
Local JSON Storage Implementation

Each collection lives in its own keyed blob: a JSON file holding an
array of camelCase objects, with dates as ISO-8601 strings. Blobs are
re-hydrated into models on every read, so a reload always reflects
what is on disk.

TRADEOFFS:
- Every write rewrites the whole blob (fine for one person's data)
- No locking; a single session is assumed to own the directory
"""

import json
from pathlib import Path
from typing import Optional, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from jarbook.config import get_settings
from jarbook.models.records import BankAccount, Debt, Expense, Income, Jar
from jarbook.services.storage.interface import (
    FinanceStorageInterface,
    NotFoundError,
    StorageError,
)

logger = structlog.get_logger(__name__)

STORAGE_KEY_EXPENSES = "expense-tracker-expenses"
STORAGE_KEY_DEBTS = "expense-tracker-debts"
STORAGE_KEY_JARS = "expense-tracker-jars"
STORAGE_KEY_INCOMES = "expense-tracker-incomes"
STORAGE_KEY_BANK_ACCOUNTS = "expense-tracker-bank-accounts"

M = TypeVar("M", bound=BaseModel)


class LocalJsonStorage(FinanceStorageInterface):
    """
    Stores the five collections as JSON files under one directory.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self._dir = Path(data_dir or get_settings().storage.data_dir)

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def _load(self, key: str, model: type[M]) -> list[M]:
        """Read a blob; a missing blob is an empty collection."""
        path = self._path(key)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            return TypeAdapter(list[model]).validate_python(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load {key}: {e}")

    def _save(self, key: str, model: type[M], records: list[M]) -> None:
        path = self._path(key)
        payload = TypeAdapter(list[model]).dump_python(records, mode="json", by_alias=True)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            with tmp.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
            tmp.replace(path)
        except OSError as e:
            raise StorageError(f"Failed to save {key}: {e}")
        logger.debug("blob_saved", key=key, count=len(records))

    def _replace_one(self, key: str, model: type[M], record: M) -> M:
        records = self._load(key, model)
        for idx, existing in enumerate(records):
            if existing.id == record.id:
                records[idx] = record
                self._save(key, model, records)
                return record
        raise NotFoundError(f"{model.__name__} not found: {record.id}")

    def _delete_one(self, key: str, model: type[M], record_id: str) -> bool:
        records = self._load(key, model)
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return False
        self._save(key, model, kept)
        return True

    # -- reads ---------------------------------------------------------------

    async def list_expenses(self) -> list[Expense]:
        return self._load(STORAGE_KEY_EXPENSES, Expense)

    async def list_debts(self) -> list[Debt]:
        return self._load(STORAGE_KEY_DEBTS, Debt)

    async def list_jars(self) -> list[Jar]:
        return self._load(STORAGE_KEY_JARS, Jar)

    async def list_incomes(self) -> list[Income]:
        return self._load(STORAGE_KEY_INCOMES, Income)

    async def list_bank_accounts(self) -> list[BankAccount]:
        return self._load(STORAGE_KEY_BANK_ACCOUNTS, BankAccount)

    # -- expenses ------------------------------------------------------------

    async def create_expense(self, expense: Expense) -> Expense:
        # Newest first: new expenses go to the front of the blob
        records = self._load(STORAGE_KEY_EXPENSES, Expense)
        self._save(STORAGE_KEY_EXPENSES, Expense, [expense, *records])
        return expense

    async def update_expense(self, expense: Expense) -> Expense:
        return self._replace_one(STORAGE_KEY_EXPENSES, Expense, expense)

    async def delete_expense(self, expense_id: str) -> bool:
        return self._delete_one(STORAGE_KEY_EXPENSES, Expense, expense_id)

    # -- debts ---------------------------------------------------------------

    async def create_debt(self, debt: Debt) -> Debt:
        records = self._load(STORAGE_KEY_DEBTS, Debt)
        self._save(STORAGE_KEY_DEBTS, Debt, [*records, debt])
        return debt

    async def update_debt(self, debt: Debt) -> Debt:
        return self._replace_one(STORAGE_KEY_DEBTS, Debt, debt)

    async def delete_debt(self, debt_id: str) -> bool:
        return self._delete_one(STORAGE_KEY_DEBTS, Debt, debt_id)

    # -- bulk collections ----------------------------------------------------

    async def replace_jars(self, jars: list[Jar]) -> None:
        self._save(STORAGE_KEY_JARS, Jar, jars)

    async def replace_incomes(self, incomes: list[Income]) -> None:
        self._save(STORAGE_KEY_INCOMES, Income, incomes)

    async def replace_bank_accounts(self, accounts: list[BankAccount]) -> None:
        self._save(STORAGE_KEY_BANK_ACCOUNTS, BankAccount, accounts)
