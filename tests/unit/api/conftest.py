"""Fixtures for API unit tests: in-memory pipelines, known webhook secrets, AsyncClient."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.api import dependencies
from app.application.handler_registry import build_registry
from app.application.pipeline import build_pipeline
from app.main import app
from app.observability.metrics import MetricsCollector
from app.security.signatures import MollieSignatureVerifier, StripeSignatureVerifier

STRIPE_SECRET = "whsec_test"
STRIPE_THIN_SECRET = "whsec_thin_test"
MOLLIE_SECRET = "mollie_test"


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def stripe_pipeline(fake_store, fake_queue, metrics):
    registry = build_registry([("checkout.session.completed", AsyncMock(return_value=None))], name="stripe")
    return build_pipeline("stripe", fake_store, fake_queue, registry, metrics=metrics)


@pytest.fixture
def mollie_pipeline(mollie_store, mollie_queue, metrics):
    registry = build_registry([("payment.updated", AsyncMock(return_value=None))], name="mollie")
    return build_pipeline("mollie", mollie_store, mollie_queue, registry, metrics=metrics)


@pytest.fixture
def stripe_verifier():
    return StripeSignatureVerifier(STRIPE_SECRET)


@pytest.fixture
def stripe_thin_verifier():
    return StripeSignatureVerifier(STRIPE_THIN_SECRET)


@pytest.fixture
def mollie_verifier():
    return MollieSignatureVerifier(MOLLIE_SECRET)


@pytest.fixture
def app_with_overrides(stripe_pipeline, mollie_pipeline, metrics, stripe_verifier, stripe_thin_verifier, mollie_verifier):
    """App with pipelines, metrics and verifiers overridden; no database or Redis."""
    pipelines = {"stripe": stripe_pipeline, "mollie": mollie_pipeline}
    app.dependency_overrides[dependencies.get_pipelines] = lambda: pipelines
    app.dependency_overrides[dependencies.get_metrics] = lambda: metrics
    app.dependency_overrides[dependencies.get_stripe_verifier] = lambda: stripe_verifier
    app.dependency_overrides[dependencies.get_stripe_thin_verifier] = lambda: stripe_thin_verifier
    app.dependency_overrides[dependencies.get_mollie_verifier] = lambda: mollie_verifier
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
