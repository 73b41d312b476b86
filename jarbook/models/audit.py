"""
Audit Models for Jarbook

Every mutation of the user's records is logged for audit purposes.
This provides:
1. Traceability of every add/edit/remove/payment
2. Debugging information when the storage backend misbehaves
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Expenses
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Debts
    DEBT_CREATED = "debt_created"
    DEBT_UPDATED = "debt_updated"
    DEBT_DELETED = "debt_deleted"
    DEBT_PAYMENT_APPLIED = "debt_payment_applied"

    # Jars, incomes, bank accounts (bulk replaced)
    JARS_REPLACED = "jars_replaced"
    JAR_PRESET_APPLIED = "jar_preset_applied"
    INCOMES_REPLACED = "incomes_replaced"
    BANK_ACCOUNTS_REPLACED = "bank_accounts_replaced"

    # Session
    STATE_RELOADED = "state_reloaded"

    # Failures
    PERSISTENCE_FAILED = "persistence_failed"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every mutation creates one of these.
    """

    # Identity
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'debt', 'jar')"
    )
    entity_id: Optional[str] = None

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one user action"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


_MUTATION_TYPES: dict[tuple[str, str], AuditEventType] = {
    ("expense", "created"): AuditEventType.EXPENSE_CREATED,
    ("expense", "updated"): AuditEventType.EXPENSE_UPDATED,
    ("expense", "deleted"): AuditEventType.EXPENSE_DELETED,
    ("debt", "created"): AuditEventType.DEBT_CREATED,
    ("debt", "updated"): AuditEventType.DEBT_UPDATED,
    ("debt", "deleted"): AuditEventType.DEBT_DELETED,
}


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_mutated("expense", "created", expense.id, cid)
        event = AuditEventBuilder.payment_applied(debt.id, delta, paid, cid)
    """

    @staticmethod
    def record_mutated(
        entity_type: str,
        action: str,
        entity_id: str,
        correlation_id: UUID,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_MUTATION_TYPES[(entity_type, action)],
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} {action}: {entity_id}",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def payment_applied(
        debt_id: str,
        delta: str,
        paid_amount: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_PAYMENT_APPLIED,
            entity_type="debt",
            entity_id=debt_id,
            correlation_id=correlation_id,
            description=f"Payment of {delta} applied, paid now {paid_amount}",
            details={
                "delta": delta,
                "paid_amount": paid_amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def collection_replaced(
        collection: str,
        count: int,
        correlation_id: UUID,
        preset: bool = False,
    ) -> AuditEvent:
        event_type = {
            "jars": AuditEventType.JARS_REPLACED,
            "incomes": AuditEventType.INCOMES_REPLACED,
            "bank_accounts": AuditEventType.BANK_ACCOUNTS_REPLACED,
        }[collection]
        if preset:
            event_type = AuditEventType.JAR_PRESET_APPLIED
        return AuditEvent(
            event_type=event_type,
            entity_type=collection,
            correlation_id=correlation_id,
            description=f"{collection} replaced with {count} records",
            details={"count": count},
            is_user_action=True,
        )

    @staticmethod
    def state_reloaded(
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_RELOADED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description="All collections reloaded from storage",
            details=counts,
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        error_message: str,
        correlation_id: UUID,
        entity_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Storage rejected {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
