"""Domain layer: models, schemas, validators, status mapping, exceptions. Pure business logic only."""

from app.domain.exceptions import DomainError, DomainValidationError, MalformedPayloadError
from app.domain.models import (
    EventCategory,
    EventShape,
    IncomingEvent,
    IngestResult,
    ProcessingStatus,
    SnapshotEvent,
    StoredEvent,
    ThinEventReference,
)
from app.domain.validators import validate_incoming_event

__all__ = [
    "DomainError",
    "DomainValidationError",
    "EventCategory",
    "EventShape",
    "IncomingEvent",
    "IngestResult",
    "MalformedPayloadError",
    "ProcessingStatus",
    "SnapshotEvent",
    "StoredEvent",
    "ThinEventReference",
    "validate_incoming_event",
]
