"""Shared in-memory fakes for Event Store and Queue. No database or Redis needed."""

from collections import deque
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import pytest

from app.application.exceptions import EventStoreUnavailableError, QueueUnavailableError
from app.domain.models.event import IncomingEvent, IngestResult, ProcessingStatus, StoredEvent


class FakeEventStore:
    """In-memory EventStore. Set available=False to simulate an unreachable database."""

    def __init__(self) -> None:
        self.rows: dict[str, StoredEvent] = {}
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise EventStoreUnavailableError("Event store unavailable: connection refused")

    async def ingest(self, event: IncomingEvent) -> IngestResult:
        self._check()
        if event.event_id in self.rows:
            return IngestResult(is_new=False, event_id=event.event_id)
        self.rows[event.event_id] = StoredEvent(
            event_id=event.event_id,
            event_type=event.event_type,
            payload=event.payload,
            processing_status=ProcessingStatus.PENDING,
            retry_count=0,
            created_at=datetime.now(timezone.utc),
            provider_created_at=event.provider_created_at,
            api_version=event.api_version,
            account_id=event.account_id,
            related_object_id=event.related_object_id,
            related_object_type=event.related_object_type,
        )
        return IngestResult(is_new=True, event_id=event.event_id)

    async def get_by_id(self, event_id: str) -> Optional[StoredEvent]:
        self._check()
        return self.rows.get(event_id)

    async def _set_status(self, event_id: str, status: ProcessingStatus) -> None:
        self._check()
        row = self.rows.get(event_id)
        if row is not None:
            self.rows[event_id] = replace(
                row, processing_status=status, processed_at=datetime.now(timezone.utc)
            )

    async def mark_processed(self, event_id: str) -> None:
        await self._set_status(event_id, ProcessingStatus.PROCESSED)

    async def mark_failed(self, event_id: str) -> None:
        await self._set_status(event_id, ProcessingStatus.FAILED)

    async def increment_retry(self, event_id: str) -> int:
        self._check()
        row = self.rows.get(event_id)
        if row is None:
            return 0
        self.rows[event_id] = replace(row, retry_count=row.retry_count + 1)
        return row.retry_count + 1

    async def get_retry_count(self, event_id: str) -> int:
        self._check()
        row = self.rows.get(event_id)
        return row.retry_count if row else 0

    async def ping(self) -> None:
        self._check()


class FakeEventQueue:
    """In-memory EventQueue. pop never blocks: an empty queue returns None."""

    def __init__(self) -> None:
        self.items: deque[str] = deque()
        self.dead_letters: list[str] = []
        self.available = True
        self.pushes = 0

    def _check(self) -> None:
        if not self.available:
            raise QueueUnavailableError("Queue unavailable: connection refused")

    async def push(self, event_id: str) -> None:
        self._check()
        self.pushes += 1
        self.items.append(event_id)

    async def pop(self, timeout: int = 0) -> Optional[str]:
        self._check()
        if not self.items:
            return None
        return self.items.popleft()

    async def push_dead_letter(self, event_id: str) -> None:
        self._check()
        self.dead_letters.append(event_id)

    async def depth(self) -> int:
        self._check()
        return len(self.items)

    async def dead_letter_depth(self) -> int:
        self._check()
        return len(self.dead_letters)

    async def ping(self) -> None:
        self._check()


@pytest.fixture
def fake_store():
    return FakeEventStore()


@pytest.fixture
def fake_queue():
    return FakeEventQueue()


@pytest.fixture
def mollie_store():
    return FakeEventStore()


@pytest.fixture
def mollie_queue():
    return FakeEventQueue()
