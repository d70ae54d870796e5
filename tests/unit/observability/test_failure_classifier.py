"""FailureClassifier tests: exception mapping, UNEXPECTED_ERROR for unknown."""

from app.application.exceptions import (
    DispatchTimeoutError,
    EventStoreUnavailableError,
    HandlerFailedError,
    OrderNotFoundError,
    QueueUnavailableError,
    ResourceFetchError,
)
from app.domain.exceptions import DomainValidationError, MalformedPayloadError
from app.observability.failure_classifier import FailureCategory, FailureClassifier
from app.security.exceptions import SignatureVerificationError, WebhookNotConfiguredError


def test_classify_boundary_rejections():
    """Signature and payload errors -> REJECTED_AT_BOUNDARY."""
    for error in (
        SignatureVerificationError("bad"),
        WebhookNotConfiguredError("x"),
        DomainValidationError("bad"),
        MalformedPayloadError("bad"),
    ):
        assert FailureClassifier.classify(error) == FailureCategory.REJECTED_AT_BOUNDARY


def test_classify_handler_errors():
    assert FailureClassifier.classify(HandlerFailedError("x")) == FailureCategory.HANDLER_FAILURE
    assert FailureClassifier.classify(DispatchTimeoutError("x")) == FailureCategory.HANDLER_TIMEOUT
    assert FailureClassifier.classify(OrderNotFoundError("x")) == FailureCategory.HANDLER_FAILURE
    assert FailureClassifier.classify(ResourceFetchError("x")) == FailureCategory.HANDLER_FAILURE


def test_classify_infrastructure_errors():
    assert FailureClassifier.classify(EventStoreUnavailableError("x")) == FailureCategory.INFRA_ERROR
    assert FailureClassifier.classify(QueueUnavailableError("x")) == FailureCategory.INFRA_ERROR
    assert FailureClassifier.classify(ConnectionRefusedError("x")) == FailureCategory.INFRA_ERROR


def test_classify_unknown_exception_unexpected():
    """Unknown exception -> UNEXPECTED_ERROR."""
    assert FailureClassifier.classify(ValueError("x")) == FailureCategory.UNEXPECTED_ERROR
    assert FailureClassifier.classify(RuntimeError("x")) == FailureCategory.UNEXPECTED_ERROR
