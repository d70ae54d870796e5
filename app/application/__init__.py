# Application layer: services that orchestrate domain and infrastructure.

from app.application.event_queue import EventQueue
from app.application.event_store import EventStore
from app.application.exceptions import (
    ApplicationError,
    DeadLetterIncompleteError,
    DispatchTimeoutError,
    EventStoreUnavailableError,
    HandlerFailedError,
    OrderNotFoundError,
    QueueUnavailableError,
    ResourceFetchError,
)
from app.application.handler_registry import (
    HANDLER_NOT_FOUND,
    HandlerRegistry,
    HandlerResult,
    build_registry,
)

__all__ = [
    "ApplicationError",
    "DeadLetterIncompleteError",
    "DispatchTimeoutError",
    "EventQueue",
    "EventStore",
    "EventStoreUnavailableError",
    "HANDLER_NOT_FOUND",
    "HandlerFailedError",
    "HandlerRegistry",
    "HandlerResult",
    "OrderNotFoundError",
    "QueueUnavailableError",
    "ResourceFetchError",
    "build_registry",
]
