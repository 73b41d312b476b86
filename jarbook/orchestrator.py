"""
Main Orchestrator for Jarbook

This module ties together all the components and defines the one
pipeline every user mutation goes through:

    validate -> persist -> await acknowledgment -> reload all collections
    -> replace state

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is written until the submission validates
- State is never patched locally; it is only replaced by a full reload
- A rejected write leaves state untouched and is not retried
- Every mutation is audited

Validation failures abort silently (SKIPPED, no notification).
Persistence failures come back as FAILED with a message for the user.
"""

from decimal import Decimal
from enum import Enum
from typing import Awaitable, Callable, Iterable, Optional
from uuid import UUID

import structlog
from pydantic import BaseModel

from jarbook.audit import AuditLogger, create_correlation_id
from jarbook.config import get_settings
from jarbook.engine import debts as debt_model
from jarbook.engine import jars as jar_model
from jarbook.models.records import (
    BankAccount,
    DebtDraft,
    ExpenseDraft,
    IncomeDraft,
    JarDraft,
    ValidationResult,
)
from jarbook.services.storage import (
    FinanceStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsFinanceStorage,
    LocalJsonStorage,
    StorageError,
)
from jarbook.state import FinanceState
from jarbook.validation import SubmissionValidator

logger = structlog.get_logger(__name__)


class MutationStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"  # Submission did not validate; nothing was written
    FAILED = "failed"  # Storage rejected the write or the reload


class MutationOutcome(BaseModel):
    """What happened to one user mutation."""

    status: MutationStatus
    correlation_id: UUID
    entity_id: Optional[str] = None
    notification: Optional[str] = None
    validation: Optional[ValidationResult] = None

    @property
    def ok(self) -> bool:
        return self.status == MutationStatus.OK


class FinanceSession:
    """
    Owns the application state for one user session.

    State lifecycle: loaded by start(), replaced after every successful
    mutation, dropped with the session. Callers read `state` and never
    modify it.
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        validator: Optional[SubmissionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or SubmissionValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._state = FinanceState()

    @property
    def state(self) -> FinanceState:
        return self._state

    @property
    def validator(self) -> SubmissionValidator:
        return self._validator

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    async def start(self) -> FinanceState:
        """
        Load every collection.

        Raises:
            StorageError: If the backend cannot be read
        """
        return await self.reload()

    async def reload(self, correlation_id: Optional[UUID] = None) -> FinanceState:
        """Fetch all five collections and replace the state with them."""
        state = FinanceState(
            expenses=await self._storage.list_expenses(),
            debts=await self._storage.list_debts(),
            jars=await self._storage.list_jars(),
            incomes=await self._storage.list_incomes(),
            bank_accounts=await self._storage.list_bank_accounts(),
        )
        self._state = state
        await self._audit_logger.log_state_reloaded(state.counts(), correlation_id)
        return state

    # -- pipeline ------------------------------------------------------------

    def _skipped(
        self,
        operation: str,
        correlation_id: UUID,
        validation: Optional[ValidationResult] = None,
        entity_id: Optional[str] = None,
    ) -> MutationOutcome:
        logger.debug(
            "mutation_skipped",
            operation=operation,
            entity_id=entity_id,
            issues=[i.field for i in validation.issues] if validation else [],
        )
        return MutationOutcome(
            status=MutationStatus.SKIPPED,
            correlation_id=correlation_id,
            entity_id=entity_id,
            validation=validation,
        )

    async def _run_mutation(
        self,
        operation: str,
        write: Callable[[], Awaitable[object]],
        correlation_id: UUID,
        failure_message: str,
        entity_id: Optional[str] = None,
        audit: Optional[Callable[[], Awaitable[None]]] = None,
        validation: Optional[ValidationResult] = None,
    ) -> MutationOutcome:
        """
        Persist, then reload everything and swap the state.

        State is only replaced by a successful reload; on any storage
        error the previous snapshot stays in place.
        """
        try:
            await write()
        except StorageError as e:
            logger.error(
                "mutation_failed",
                operation=operation,
                entity_id=entity_id,
                error=str(e),
            )
            await self._audit_logger.log_persistence_failed(
                operation=operation,
                error_message=str(e),
                correlation_id=correlation_id,
                entity_id=entity_id,
            )
            return MutationOutcome(
                status=MutationStatus.FAILED,
                correlation_id=correlation_id,
                entity_id=entity_id,
                notification=failure_message,
                validation=validation,
            )

        if audit:
            await audit()

        try:
            await self.reload(correlation_id)
        except StorageError as e:
            logger.error("reload_failed", operation=operation, error=str(e))
            await self._audit_logger.log_persistence_failed(
                operation=f"reload after {operation}",
                error_message=str(e),
                correlation_id=correlation_id,
                entity_id=entity_id,
            )
            return MutationOutcome(
                status=MutationStatus.FAILED,
                correlation_id=correlation_id,
                entity_id=entity_id,
                notification="Saved, but the latest data could not be loaded. Please refresh.",
                validation=validation,
            )

        return MutationOutcome(
            status=MutationStatus.OK,
            correlation_id=correlation_id,
            entity_id=entity_id,
            validation=validation,
        )

    def _record_audit(self, entity_type: str, action: str, entity_id: str, cid: UUID):
        async def audit() -> None:
            await self._audit_logger.log_record_mutated(entity_type, action, entity_id, cid)
        return audit

    # -- expenses ------------------------------------------------------------

    async def add_expense(self, draft: ExpenseDraft) -> MutationOutcome:
        cid = create_correlation_id()
        validation = self._validator.validate_expense(draft)
        if not validation.is_valid:
            return self._skipped("create_expense", cid, validation)

        expense = self._validator.build_expense(draft)
        return await self._run_mutation(
            "create_expense",
            lambda: self._storage.create_expense(expense),
            cid,
            "Could not save the expense. Please try again.",
            entity_id=expense.id,
            audit=self._record_audit("expense", "created", expense.id, cid),
            validation=validation,
        )

    async def edit_expense(self, expense_id: str, draft: ExpenseDraft) -> MutationOutcome:
        """Replace every field of an expense except its id."""
        cid = create_correlation_id()
        validation = self._validator.validate_expense(draft)
        if not validation.is_valid or self._state.find_expense(expense_id) is None:
            return self._skipped("update_expense", cid, validation, expense_id)

        expense = self._validator.build_expense(draft, record_id=expense_id)
        return await self._run_mutation(
            "update_expense",
            lambda: self._storage.update_expense(expense),
            cid,
            "Could not update the expense. Please try again.",
            entity_id=expense_id,
            audit=self._record_audit("expense", "updated", expense_id, cid),
            validation=validation,
        )

    async def remove_expense(self, expense_id: str) -> MutationOutcome:
        cid = create_correlation_id()
        return await self._run_mutation(
            "delete_expense",
            lambda: self._storage.delete_expense(expense_id),
            cid,
            "Could not delete the expense. Please try again.",
            entity_id=expense_id,
            audit=self._record_audit("expense", "deleted", expense_id, cid),
        )

    # -- debts ---------------------------------------------------------------

    async def add_debt(self, draft: DebtDraft) -> MutationOutcome:
        cid = create_correlation_id()
        validation = self._validator.validate_debt(draft)
        if not validation.is_valid:
            return self._skipped("create_debt", cid, validation)

        debt = self._validator.build_debt(draft)
        return await self._run_mutation(
            "create_debt",
            lambda: self._storage.create_debt(debt),
            cid,
            "Could not save the debt. Please try again.",
            entity_id=debt.id,
            audit=self._record_audit("debt", "created", debt.id, cid),
            validation=validation,
        )

    async def edit_debt(self, debt_id: str, draft: DebtDraft) -> MutationOutcome:
        """Full-record edit; a blank paid amount keeps the current one."""
        cid = create_correlation_id()
        validation = self._validator.validate_debt(draft)
        existing = self._state.find_debt(debt_id)
        if not validation.is_valid or existing is None:
            return self._skipped("update_debt", cid, validation, debt_id)

        debt = self._validator.build_debt(
            draft, record_id=debt_id, paid_amount=existing.paid_amount
        )
        return await self._run_mutation(
            "update_debt",
            lambda: self._storage.update_debt(debt),
            cid,
            "Could not update the debt. Please try again.",
            entity_id=debt_id,
            audit=self._record_audit("debt", "updated", debt_id, cid),
            validation=validation,
        )

    async def remove_debt(self, debt_id: str) -> MutationOutcome:
        cid = create_correlation_id()
        return await self._run_mutation(
            "delete_debt",
            lambda: self._storage.delete_debt(debt_id),
            cid,
            "Could not delete the debt. Please try again.",
            entity_id=debt_id,
            audit=self._record_audit("debt", "deleted", debt_id, cid),
        )

    async def apply_payment(self, debt_id: str, delta: Decimal) -> MutationOutcome:
        """
        Add delta to a debt's paid amount (negative reverses a payment).

        The result is clamped to [0, total]; overshooting is not an error.
        """
        cid = create_correlation_id()
        existing = self._state.find_debt(debt_id)
        if existing is None:
            return self._skipped("apply_payment", cid, entity_id=debt_id)

        debt = debt_model.apply_payment(existing, delta)

        async def audit() -> None:
            await self._audit_logger.log_payment_applied(
                debt_id=debt_id,
                delta=str(delta),
                paid_amount=str(debt.paid_amount),
                correlation_id=cid,
            )

        return await self._run_mutation(
            "apply_payment",
            lambda: self._storage.update_debt(debt),
            cid,
            "Could not record the payment. Please try again.",
            entity_id=debt_id,
            audit=audit,
        )

    # -- jars ----------------------------------------------------------------

    async def _replace_jars(
        self,
        operation: str,
        jars: list,
        cid: UUID,
        entity_id: Optional[str] = None,
        preset: bool = False,
        validation: Optional[ValidationResult] = None,
    ) -> MutationOutcome:
        async def audit() -> None:
            await self._audit_logger.log_collection_replaced("jars", len(jars), cid, preset)

        return await self._run_mutation(
            operation,
            lambda: self._storage.replace_jars(jars),
            cid,
            "Could not save your jars. Please try again.",
            entity_id=entity_id,
            audit=audit,
            validation=validation,
        )

    async def save_jar(self, draft: JarDraft, jar_id: Optional[str] = None) -> MutationOutcome:
        """
        Create a jar, or edit the jar with jar_id.

        Over-allocation only produces a warning; the jar is still saved.
        """
        cid = create_correlation_id()
        existing = self._state.find_jar(jar_id) if jar_id else None
        if jar_id and existing is None:
            return self._skipped("save_jar", cid, entity_id=jar_id)

        others = [j for j in self._state.jars if j.id != jar_id]
        validation = self._validator.validate_jar(draft, others)
        if not validation.is_valid:
            return self._skipped("save_jar", cid, validation, jar_id)

        jar = self._validator.build_jar(
            draft,
            record_id=jar_id,
            current_amount=existing.current_amount if existing else Decimal("0"),
        )
        jars = jar_model.upsert(self._state.jars, jar)
        return await self._replace_jars("save_jar", jars, cid, jar.id, validation=validation)

    async def remove_jar(self, jar_id: str) -> MutationOutcome:
        cid = create_correlation_id()
        jars = jar_model.remove(self._state.jars, jar_id)
        return await self._replace_jars("remove_jar", jars, cid, jar_id)

    async def apply_preset(self) -> MutationOutcome:
        """
        Replace all jars with the six default jars.

        The replacement is unconditional; the dashboard only offers it
        while there are no jars.
        """
        cid = create_correlation_id()
        jars = jar_model.apply_default_preset()
        return await self._replace_jars("apply_preset", jars, cid, preset=True)

    # -- incomes -------------------------------------------------------------

    async def _replace_incomes(
        self,
        operation: str,
        incomes: list,
        cid: UUID,
        entity_id: Optional[str] = None,
        validation: Optional[ValidationResult] = None,
    ) -> MutationOutcome:
        async def audit() -> None:
            await self._audit_logger.log_collection_replaced("incomes", len(incomes), cid)

        return await self._run_mutation(
            operation,
            lambda: self._storage.replace_incomes(incomes),
            cid,
            "Could not save your income. Please try again.",
            entity_id=entity_id,
            audit=audit,
            validation=validation,
        )

    async def add_income(self, draft: IncomeDraft) -> MutationOutcome:
        cid = create_correlation_id()
        validation = self._validator.validate_income(draft)
        if not validation.is_valid:
            return self._skipped("add_income", cid, validation)

        income = self._validator.build_income(draft)
        incomes = jar_model.upsert(self._state.incomes, income)
        return await self._replace_incomes("add_income", incomes, cid, income.id, validation)

    async def remove_income(self, income_id: str) -> MutationOutcome:
        cid = create_correlation_id()
        incomes = jar_model.remove(self._state.incomes, income_id)
        return await self._replace_incomes("remove_income", incomes, cid, income_id)

    # -- bank accounts -------------------------------------------------------

    async def replace_bank_accounts(self, accounts: Iterable[BankAccount]) -> MutationOutcome:
        """Overwrite the bank account list. No reconciliation is done."""
        cid = create_correlation_id()
        accounts = list(accounts)

        async def audit() -> None:
            await self._audit_logger.log_collection_replaced(
                "bank_accounts", len(accounts), cid
            )

        return await self._run_mutation(
            "replace_bank_accounts",
            lambda: self._storage.replace_bank_accounts(accounts),
            cid,
            "Could not save your bank accounts. Please try again.",
            audit=audit,
        )


def create_app_components(
    backend: Optional[str] = None,
) -> tuple[FinanceSession, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        backend: "local" or "sheets". Defaults to the configured backend.
                 If Sheets is not configured or the spreadsheet cannot be
                 opened we fall back to local storage.

    Returns:
        (session, sheets_client); sheets_client is None for local storage
    """
    backend = backend or get_settings().storage.backend
    sheets_client = None
    storage: Optional[FinanceStorageInterface] = None
    audit_logger = None

    if backend == "sheets":
        try:
            sheets_client = GoogleSheetsClient()
            sheets_client.get_spreadsheet()  # Fail here, not on the first read
            storage = GoogleSheetsFinanceStorage(sheets_client)
            audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
        except Exception as e:
            # Sheets not configured - continue with local storage
            logger.warning("sheets_unavailable_using_local", error=str(e))
            sheets_client = None
            storage = None

    if storage is None:
        storage = LocalJsonStorage()
        audit_logger = AuditLogger()  # Local-only logging

    session = FinanceSession(storage=storage, audit_logger=audit_logger)
    return session, sheets_client
