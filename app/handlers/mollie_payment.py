"""Mollie payment handler (thin event): re-fetch the payment and apply its status to the order."""

import logging

from app.application.gateways import OrderGateway, ResourceFetcher
from app.application.handler_registry import HandlerInput, HandlerResult
from app.domain.models.event import ThinEventReference
from app.domain.schemas.event import ProviderPayment, parse_model
from app.handlers.order_payment import apply_provider_payment_status

logger = logging.getLogger(__name__)

PAYMENT_UPDATED = "payment.updated"


class MolliePaymentHandler:
    def __init__(self, fetcher: ResourceFetcher, orders: OrderGateway) -> None:
        self._fetcher = fetcher
        self._orders = orders

    async def __call__(self, event: HandlerInput) -> HandlerResult:
        if not isinstance(event, ThinEventReference):
            return HandlerResult.failed(f"{event.event_type} expected a thin event reference")
        raw = await self._fetcher.fetch("payment", event.related_object_id)
        payment = parse_model(ProviderPayment, raw)
        if payment.order_id is None:
            # Subscription and other non-order payments carry no orderId.
            logger.info("payment_without_order", extra={"payment_id": payment.id})
            return HandlerResult.ok("No orderId in payment metadata")
        return await apply_provider_payment_status(self._orders, payment.order_id, payment.status)
