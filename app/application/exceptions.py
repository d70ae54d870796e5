"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EventStoreUnavailableError(ApplicationError):
    """Raised when the Event Store cannot be reached. Retryable at a higher level."""


class QueueUnavailableError(ApplicationError):
    """Raised when the queue backend cannot be reached. Retryable at a higher level."""


class HandlerFailedError(ApplicationError):
    """Raised when a business handler reports failure without raising itself."""


class DispatchTimeoutError(ApplicationError):
    """Raised when a handler does not finish within the dispatch timeout."""


class OrderNotFoundError(ApplicationError):
    """Raised when a payment event references an order that does not exist."""


class ResourceFetchError(ApplicationError):
    """Raised when a thin event's resource cannot be re-fetched from the provider."""


class DeadLetterIncompleteError(EventStoreUnavailableError):
    """Raised when an id was moved to the dead-letter queue but its FAILED status could not be stored."""
