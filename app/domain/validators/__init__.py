"""Domain validators. Pure validation functions."""

from app.domain.validators.event_validator import (
    validate_event_id,
    validate_event_type,
    validate_incoming_event,
    validate_payload_json_serializable,
)

__all__ = [
    "validate_event_id",
    "validate_event_type",
    "validate_incoming_event",
    "validate_payload_json_serializable",
]
