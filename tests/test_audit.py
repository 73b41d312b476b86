"""Tests for the audit logger."""

import asyncio
from uuid import uuid4

from jarbook.audit import AuditLogger, create_correlation_id
from jarbook.models.audit import AuditEventBuilder, AuditEventType
from jarbook.services.storage import AuditStorageInterface


class RecordingAuditStorage(AuditStorageInterface):
    def __init__(self, fail=False):
        self.events = []
        self.fail = fail

    async def append_event(self, event):
        if self.fail:
            raise RuntimeError("sheet unavailable")
        self.events.append(event)
        return True

    async def get_recent_events(self, limit=100):
        if self.fail:
            raise RuntimeError("sheet unavailable")
        return list(reversed(self.events))[:limit]


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_local_only(self):
        """Test that logging without storage succeeds."""
        logger = AuditLogger()
        assert asyncio.run(logger.log_error("load_failed", "something broke")) is None
        assert asyncio.run(logger.recent_events()) == []

    def test_persists_events(self):
        storage = RecordingAuditStorage()
        logger = AuditLogger(storage)
        cid = create_correlation_id()
        asyncio.run(logger.log_record_mutated("debt", "created", "d1", cid))
        asyncio.run(logger.log_payment_applied("d1", "500", "3500", cid))

        assert [e.event_type for e in storage.events] == [
            AuditEventType.DEBT_CREATED,
            AuditEventType.DEBT_PAYMENT_APPLIED,
        ]
        assert {e.correlation_id for e in storage.events} == {cid}

    def test_log_error_is_persisted(self):
        storage = RecordingAuditStorage()
        logger = AuditLogger(storage)
        asyncio.run(logger.log_error("load_failed", "blob unreadable", {"backend": "local"}))
        [event] = storage.events
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.error_message == "blob unreadable"
        assert event.details == {"backend": "local"}

    def test_recent_events_newest_first(self):
        storage = RecordingAuditStorage()
        logger = AuditLogger(storage)
        asyncio.run(logger.log_record_mutated("expense", "created", "e1", uuid4()))
        asyncio.run(logger.log_record_mutated("expense", "deleted", "e1", uuid4()))
        events = asyncio.run(logger.recent_events(limit=1))
        assert [e.event_type for e in events] == [AuditEventType.EXPENSE_DELETED]

    def test_storage_failure_is_swallowed(self):
        """Test that a broken audit backend doesn't raise."""
        logger = AuditLogger(RecordingAuditStorage(fail=True))
        event_logged = asyncio.run(
            logger.log_persistence_failed("create_expense", "disk full", uuid4())
        )
        assert event_logged is None
        assert asyncio.run(logger.recent_events()) == []

    def test_log_returns_false_on_storage_failure(self):
        logger = AuditLogger(RecordingAuditStorage(fail=True))
        event = AuditEventBuilder.state_reloaded({"expenses": 0})
        assert asyncio.run(logger.log(event)) is False

    def test_correlation_ids_are_unique(self):
        assert create_correlation_id() != create_correlation_id()
