"""Domain model for payment-provider events. Pure business semantics — no ORM or infrastructure."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class ProcessingStatus(str, Enum):
    """Lifecycle status of a stored event. PENDING is the initial state."""

    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    FAILED = "FAILED"


class EventCategory(str, Enum):
    """Event category. Each category owns its own store table, queues and registry."""

    STRIPE = "stripe"
    MOLLIE = "mollie"


class EventShape(str, Enum):
    """How a handler receives an event: full snapshot payload, or a thin reference to re-fetch."""

    SNAPSHOT = "snapshot"
    THIN = "thin"


@dataclass(frozen=True)
class IncomingEvent:
    """Event as extracted by the ingestion endpoint, before it is stored."""

    event_id: str
    event_type: str
    payload: Dict[str, Any]
    provider_created_at: Optional[datetime] = None
    api_version: Optional[str] = None
    account_id: Optional[str] = None
    related_object_id: Optional[str] = None
    related_object_type: Optional[str] = None


@dataclass(frozen=True)
class IngestResult:
    """Outcome of an idempotent insert. is_new is False when the id was already stored."""

    is_new: bool
    event_id: str


@dataclass(frozen=True)
class StoredEvent:
    """An event row as read back from the Event Store."""

    event_id: str
    event_type: str
    payload: Dict[str, Any]
    processing_status: ProcessingStatus
    retry_count: int
    created_at: datetime
    processed_at: Optional[datetime] = None
    provider_created_at: Optional[datetime] = None
    api_version: Optional[str] = None
    account_id: Optional[str] = None
    related_object_id: Optional[str] = None
    related_object_type: Optional[str] = None


@dataclass(frozen=True)
class ThinEventReference:
    """What a thin-event handler receives: enough to re-fetch the resource from the provider."""

    event_id: str
    event_type: str
    related_object_id: str
    related_object_type: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class SnapshotEvent:
    """What a snapshot handler receives: the full provider document."""

    event_id: str
    event_type: str
    payload: Dict[str, Any] = field(default_factory=dict)


def classify_event(event: StoredEvent) -> EventShape:
    """
    Decide the dispatch shape from the stored payload. Snapshot events carry data.object;
    thin events carry only a related_object reference.
    """
    payload = event.payload or {}
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("object"), dict):
        return EventShape.SNAPSHOT
    related = payload.get("related_object")
    if isinstance(related, dict) and related.get("id"):
        return EventShape.THIN
    return EventShape.SNAPSHOT


def to_handler_input(event: StoredEvent) -> "SnapshotEvent | ThinEventReference":
    """Build the argument passed to the handler for the event's shape."""
    if classify_event(event) is EventShape.THIN:
        related = event.payload["related_object"]
        return ThinEventReference(
            event_id=event.event_id,
            event_type=event.event_type,
            related_object_id=related["id"],
            related_object_type=related.get("type") or event.related_object_type,
            url=related.get("url"),
        )
    return SnapshotEvent(
        event_id=event.event_id,
        event_type=event.event_type,
        payload=event.payload,
    )
