"""
Audit Logger

Every mutation of the user's records is logged. This gives us:
1. A trail of what the user added, edited and removed
2. A record of every write the storage backend rejected
3. Correlation IDs that tie the events of one user action together

The audit logger:
- Is async, like the storage it writes to
- Never raises; a broken audit backend must not break a mutation
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from jarbook.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from jarbook.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (always)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        self._storage = storage
        self._logger = structlog.get_logger("jarbook.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_record_mutated(
        self,
        entity_type: str,
        action: str,
        entity_id: str,
        correlation_id: UUID,
        details: Optional[dict] = None,
    ) -> None:
        """Log an expense or debt create/update/delete."""
        event = AuditEventBuilder.record_mutated(
            entity_type=entity_type,
            action=action,
            entity_id=entity_id,
            correlation_id=correlation_id,
            details=details,
        )
        await self.log(event)

    async def log_payment_applied(
        self,
        debt_id: str,
        delta: str,
        paid_amount: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.payment_applied(
            debt_id=debt_id,
            delta=delta,
            paid_amount=paid_amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_collection_replaced(
        self,
        collection: str,
        count: int,
        correlation_id: UUID,
        preset: bool = False,
    ) -> None:
        event = AuditEventBuilder.collection_replaced(
            collection=collection,
            count=count,
            correlation_id=correlation_id,
            preset=preset,
        )
        await self.log(event)

    async def log_state_reloaded(
        self,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.state_reloaded(counts, correlation_id))

    async def log_persistence_failed(
        self,
        operation: str,
        error_message: str,
        correlation_id: UUID,
        entity_id: Optional[str] = None,
    ) -> None:
        """Log a write the storage backend rejected."""
        event = AuditEventBuilder.persistence_failed(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
            entity_id=entity_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def recent_events(self, limit: int = 20) -> list[AuditEvent]:
        """
        Most recent persisted events, newest first.

        Empty when only local logging is configured or the backend
        can't be read.
        """
        if not self._storage:
            return []
        try:
            return await self._storage.get_recent_events(limit)
        except Exception as e:
            self._logger.error("audit_read_failed", error=str(e))
            return []


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g. saving an expense)
    and pass it through all subsequent operations.
    """
    return uuid4()
