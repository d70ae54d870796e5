from app.domain.models.event import (
    EventCategory,
    EventShape,
    IncomingEvent,
    IngestResult,
    ProcessingStatus,
    SnapshotEvent,
    StoredEvent,
    ThinEventReference,
    classify_event,
    to_handler_input,
)

__all__ = [
    "EventCategory",
    "EventShape",
    "IncomingEvent",
    "IngestResult",
    "ProcessingStatus",
    "SnapshotEvent",
    "StoredEvent",
    "ThinEventReference",
    "classify_event",
    "to_handler_input",
]
