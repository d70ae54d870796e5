"""Order payment handler: applies a provider payment status to the order it belongs to."""

import logging
from typing import Any, Dict, Optional

from app.application.gateways import OrderGateway
from app.application.handler_registry import HandlerInput, HandlerResult
from app.domain.models.event import SnapshotEvent
from app.domain.schemas.event import OrderPaymentPayload, parse_model
from app.domain.status_mapper import map_payment_status

logger = logging.getLogger(__name__)


async def apply_provider_payment_status(
    orders: OrderGateway,
    order_id: str,
    provider_status: Optional[str],
) -> HandlerResult:
    """Terminal statuses update the order; non-terminal ones are acknowledged with no change."""
    mapping = map_payment_status(provider_status)
    if mapping is None:
        logger.info(
            "payment_status_non_terminal",
            extra={"order_id": order_id, "provider_status": provider_status},
        )
        return HandlerResult.ok(f"Non-terminal status {provider_status!r}; no change")

    changed = await orders.apply_payment_status(order_id, mapping)
    return HandlerResult.ok("updated" if changed else "unchanged")


def _payment_body(payload: Dict[str, Any]) -> Dict[str, Any]:
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("object"), dict):
        return data["object"]
    return payload


class OrderPaymentHandler:
    """Snapshot handler for payloads carrying {status, orderId}, top level or under data.object."""

    def __init__(self, orders: OrderGateway) -> None:
        self._orders = orders

    async def __call__(self, event: HandlerInput) -> HandlerResult:
        if not isinstance(event, SnapshotEvent):
            return HandlerResult.failed(f"{event.event_type} expected a snapshot payload")
        payment = parse_model(OrderPaymentPayload, _payment_body(event.payload))
        return await apply_provider_payment_status(self._orders, payment.order_id, payment.status)
