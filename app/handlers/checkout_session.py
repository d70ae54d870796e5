"""Checkout session handler (snapshot). Translates session events into provider payment statuses."""

import logging
from typing import Dict, Optional

from app.application.gateways import OrderGateway
from app.application.handler_registry import HandlerInput, HandlerResult
from app.domain.models.event import SnapshotEvent
from app.domain.schemas.event import CheckoutSessionObject, parse_model
from app.handlers.order_payment import apply_provider_payment_status

logger = logging.getLogger(__name__)

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
CHECKOUT_SESSION_ASYNC_SUCCEEDED = "checkout.session.async_payment_succeeded"
CHECKOUT_SESSION_ASYNC_FAILED = "checkout.session.async_payment_failed"
CHECKOUT_SESSION_EXPIRED = "checkout.session.expired"

# Completed sessions are resolved from payment_status instead.
_EVENT_PROVIDER_STATUS: Dict[str, str] = {
    CHECKOUT_SESSION_ASYNC_SUCCEEDED: "paid",
    CHECKOUT_SESSION_ASYNC_FAILED: "failed",
    CHECKOUT_SESSION_EXPIRED: "expired",
}

CHECKOUT_SESSION_EVENT_TYPES = (CHECKOUT_SESSION_COMPLETED, *_EVENT_PROVIDER_STATUS)


def provider_status_for(event_type: str, session: CheckoutSessionObject) -> Optional[str]:
    if event_type == CHECKOUT_SESSION_COMPLETED:
        # Delayed payment methods complete the session while still unpaid.
        return "paid" if session.payment_status == "paid" else "pending"
    return _EVENT_PROVIDER_STATUS.get(event_type)


class CheckoutSessionHandler:
    def __init__(self, orders: OrderGateway) -> None:
        self._orders = orders

    async def __call__(self, event: HandlerInput) -> HandlerResult:
        if not isinstance(event, SnapshotEvent):
            return HandlerResult.failed(f"{event.event_type} expected a snapshot payload")
        data = event.payload.get("data") or {}
        session = parse_model(CheckoutSessionObject, data.get("object"))
        order_id = session.order_id
        if order_id is None:
            logger.info(
                "checkout_session_without_order",
                extra={"session_id": session.id, "event_type": event.event_type},
            )
            return HandlerResult.ok("No orderId in session metadata")
        return await apply_provider_payment_status(
            self._orders, order_id, provider_status_for(event.event_type, session)
        )
