"""Validators for incoming payment events. Pure functions, no infrastructure or DB access."""

import json
from typing import Any, Dict

from app.domain.exceptions import DomainValidationError, MalformedPayloadError
from app.domain.models.event import IncomingEvent

# Column width of event_store.id / event_type
MAX_EVENT_ID_LENGTH = 255
MAX_EVENT_TYPE_LENGTH = 255


def validate_event_id(event_id: str) -> None:
    """Event id is the idempotency key: non-empty and within the column width."""
    if not event_id or not event_id.strip():
        raise DomainValidationError("event id must not be empty")
    if len(event_id) > MAX_EVENT_ID_LENGTH:
        raise DomainValidationError(f"event id longer than {MAX_EVENT_ID_LENGTH} characters")


def validate_event_type(event_type: str) -> None:
    if not event_type or not event_type.strip():
        raise DomainValidationError("event type must not be empty")
    if len(event_type) > MAX_EVENT_TYPE_LENGTH:
        raise DomainValidationError(f"event type longer than {MAX_EVENT_TYPE_LENGTH} characters")


def validate_payload_json_serializable(payload: Dict[str, Any]) -> None:
    """Payload is stored as a JSON document. Raises MalformedPayloadError if not serializable."""
    if not isinstance(payload, dict):
        raise MalformedPayloadError("payload must be a JSON object")
    try:
        json.dumps(payload)
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError("payload must be JSON-serializable") from e


def validate_incoming_event(event: IncomingEvent) -> None:
    """Validate an extracted event before it reaches the Event Store."""
    validate_event_id(event.event_id)
    validate_event_type(event.event_type)
    validate_payload_json_serializable(event.payload)
