"""FastAPI dependency injection: pipelines, metrics, signature verifiers, correlation_id."""

from typing import Annotated, Dict

from fastapi import Depends, Request

from app.application.pipeline import EventPipeline
from app.config.settings import AppSettings, get_settings
from app.domain.models.event import EventCategory
from app.observability.metrics import MetricsCollector
from app.security.signatures import MollieSignatureVerifier, StripeSignatureVerifier


def get_pipelines(request: Request) -> Dict[str, EventPipeline]:
    """Pipelines built by the composition root at startup (app.state.container)."""
    return request.app.state.container.pipelines


def get_metrics(request: Request) -> MetricsCollector:
    return request.app.state.container.metrics


def get_stripe_pipeline(
    pipelines: Annotated[Dict[str, EventPipeline], Depends(get_pipelines)],
) -> EventPipeline:
    return pipelines[EventCategory.STRIPE.value]


def get_mollie_pipeline(
    pipelines: Annotated[Dict[str, EventPipeline], Depends(get_pipelines)],
) -> EventPipeline:
    return pipelines[EventCategory.MOLLIE.value]


def get_stripe_verifier(
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> StripeSignatureVerifier:
    return StripeSignatureVerifier(
        settings.stripe_webhook_secret,
        tolerance_seconds=settings.signature_tolerance_seconds,
    )


def get_stripe_thin_verifier(
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> StripeSignatureVerifier:
    return StripeSignatureVerifier(
        settings.stripe_webhook_secret_thin,
        tolerance_seconds=settings.signature_tolerance_seconds,
    )


def get_mollie_verifier(
    settings: Annotated[AppSettings, Depends(get_settings)],
) -> MollieSignatureVerifier:
    return MollieSignatureVerifier(settings.mollie_webhook_secret)


def get_correlation_id(request: Request) -> str:
    """Extract correlation_id from request.state (set by middleware)."""
    return getattr(request.state, "correlation_id", "") or ""
