"""Domain schemas. Webhook envelopes, typed payloads and responses."""

from app.domain.schemas.event import (
    CheckoutSessionObject,
    MollieNotification,
    OrderPaymentPayload,
    ProviderAccount,
    ProviderPayment,
    QueueDepthResponse,
    RegisteredHandlersResponse,
    RelatedObject,
    StripeSnapshotEvent,
    ThinEventPayload,
    WebhookAck,
    parse_model,
)

__all__ = [
    "CheckoutSessionObject",
    "MollieNotification",
    "OrderPaymentPayload",
    "ProviderAccount",
    "ProviderPayment",
    "QueueDepthResponse",
    "RegisteredHandlersResponse",
    "RelatedObject",
    "StripeSnapshotEvent",
    "ThinEventPayload",
    "WebhookAck",
    "parse_model",
]
