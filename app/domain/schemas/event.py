"""Pydantic schemas for webhook bodies, typed event payloads and API responses. No DB or infrastructure."""

from datetime import datetime
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.domain.exceptions import MalformedPayloadError


# ---------------------------------------------------------------------------
# Inbound webhook envelopes
# ---------------------------------------------------------------------------

class RelatedObject(BaseModel):
    """Reference to the resource a thin event is about."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    type: Optional[str] = None
    url: Optional[str] = None


class StripeEventData(BaseModel):
    model_config = ConfigDict(extra="allow")

    object: Dict[str, Any]


class StripeSnapshotEvent(BaseModel):
    """V1 snapshot event: the full resource is embedded under data.object."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    created: datetime
    api_version: Optional[str] = None
    account: Optional[str] = None
    data: StripeEventData


class ThinEventPayload(BaseModel):
    """V2 thin event: only a related_object reference; full state is re-fetched by the handler."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    created: datetime
    related_object: Optional[RelatedObject] = None


class MollieNotification(BaseModel):
    """Mollie posts form data carrying only the resource id."""

    id: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Typed payloads, keyed by event type (opaque dict for shapes not modelled)
# ---------------------------------------------------------------------------

class OrderPaymentPayload(BaseModel):
    """Provider payment state for one order."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: str
    order_id: str = Field(..., alias="orderId", min_length=1)


class CheckoutSessionObject(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    status: Optional[str] = None
    payment_status: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def order_id(self) -> Optional[str]:
        value = self.metadata.get("orderId")
        return str(value) if value is not None else None


class ProviderPayment(BaseModel):
    """Payment resource as re-fetched from the provider API."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str
    metadata: Optional[Dict[str, Any]] = None

    @property
    def order_id(self) -> Optional[str]:
        value = (self.metadata or {}).get("orderId")
        return str(value) if value is not None else None


class ProviderAccount(BaseModel):
    """Connected account as re-fetched from the provider API (only the fields we read)."""

    model_config = ConfigDict(extra="allow")

    id: str
    requirements: Optional[Dict[str, Any]] = None
    configuration: Optional[Dict[str, Any]] = None

    @property
    def requirements_status(self) -> Optional[str]:
        summary = (self.requirements or {}).get("summary") or {}
        deadline = summary.get("minimum_deadline") or {}
        return deadline.get("status")

    def capability_status(self, capability: str = "card_payments") -> Optional[str]:
        merchant = (self.configuration or {}).get("merchant") or {}
        capabilities = merchant.get("capabilities") or {}
        entry = capabilities.get(capability) or {}
        return entry.get("status")


def parse_model(model: Type[BaseModel], data: Any) -> BaseModel:
    """Validate data against model. Raises MalformedPayloadError on failure."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(f"Invalid {model.__name__}: {e.error_count()} error(s)") from e


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class WebhookAck(BaseModel):
    """Webhook acknowledgement. received is True whenever the provider should stop retrying."""

    received: bool = True
    duplicate: Optional[bool] = None
    skipped: Optional[bool] = None
    error: Optional[str] = None


class QueueDepthResponse(BaseModel):
    category: str
    queue_depth: int
    dead_letter_depth: int


class RegisteredHandlersResponse(BaseModel):
    category: str
    event_types: list[str]
