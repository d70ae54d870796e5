"""Event Store protocol. Application layer depends on this; infrastructure implements it."""

from typing import Optional, Protocol

from app.domain.models.event import IncomingEvent, IngestResult, StoredEvent


class EventStore(Protocol):
    """
    Durable, idempotent record of inbound webhook events and their processing lifecycle.
    Implementations raise EventStoreUnavailableError when the backend cannot be reached.
    """

    async def ingest(self, event: IncomingEvent) -> IngestResult:
        """Atomic insert-or-nothing keyed by event id. is_new is False if the id already existed."""
        ...

    async def get_by_id(self, event_id: str) -> Optional[StoredEvent]:
        """Return the stored event, or None if no row exists."""
        ...

    async def mark_processed(self, event_id: str) -> None:
        """Set status PROCESSED and processed_at = now."""
        ...

    async def mark_failed(self, event_id: str) -> None:
        """Set status FAILED and processed_at = now."""
        ...

    async def increment_retry(self, event_id: str) -> int:
        """Atomically increment retry_count in the backend; return the new value."""
        ...

    async def get_retry_count(self, event_id: str) -> int:
        """Current retry_count, 0 if the row does not exist."""
        ...

    async def ping(self) -> None:
        """Round-trip to the backend; raises EventStoreUnavailableError when it is unreachable."""
        ...
