"""Failure categorization for metrics and logs. Maps exceptions to the pipeline's error taxonomy."""

from enum import Enum

from app.application.exceptions import (
    ApplicationError,
    DispatchTimeoutError,
    EventStoreUnavailableError,
    HandlerFailedError,
    QueueUnavailableError,
)
from app.domain.exceptions import DomainError
from app.security.exceptions import SecurityError


class FailureCategory(str, Enum):
    """Taxonomy for failure classification."""

    REJECTED_AT_BOUNDARY = "REJECTED_AT_BOUNDARY"
    HANDLER_FAILURE = "HANDLER_FAILURE"
    HANDLER_TIMEOUT = "HANDLER_TIMEOUT"
    INFRA_ERROR = "INFRA_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class FailureClassifier:
    """
    Classifies exceptions into FailureCategory. Callers attach the category to logs and
    metrics; classification never changes control flow.
    """

    @staticmethod
    def classify(exception: BaseException) -> FailureCategory:
        """Map exception to FailureCategory. Unknown -> UNEXPECTED_ERROR."""
        if isinstance(exception, (SecurityError, DomainError)):
            return FailureCategory.REJECTED_AT_BOUNDARY
        if isinstance(exception, DispatchTimeoutError):
            return FailureCategory.HANDLER_TIMEOUT
        if isinstance(exception, HandlerFailedError):
            return FailureCategory.HANDLER_FAILURE
        if isinstance(exception, (EventStoreUnavailableError, QueueUnavailableError)):
            return FailureCategory.INFRA_ERROR
        if isinstance(exception, (ConnectionError, OSError)):
            return FailureCategory.INFRA_ERROR
        if isinstance(exception, ApplicationError):
            return FailureCategory.HANDLER_FAILURE
        return FailureCategory.UNEXPECTED_ERROR
