"""Static (event_type, handler) tables handed to build_registry by the composition root."""

from typing import List, Tuple

from app.application.gateways import MerchantGateway, OrderGateway, ResourceFetcher
from app.application.handler_registry import EventHandler
from app.handlers.account_status import (
    ACCOUNT_CAPABILITY_STATUS_UPDATED,
    ACCOUNT_REQUIREMENTS_UPDATED,
    AccountCapabilityHandler,
    AccountRequirementsHandler,
)
from app.handlers.checkout_session import CHECKOUT_SESSION_EVENT_TYPES, CheckoutSessionHandler
from app.handlers.mollie_payment import PAYMENT_UPDATED, MolliePaymentHandler

HandlerTable = List[Tuple[str, EventHandler]]


def stripe_handlers(
    orders: OrderGateway,
    merchants: MerchantGateway,
    fetcher: ResourceFetcher,
) -> HandlerTable:
    checkout = CheckoutSessionHandler(orders)
    return [
        *((event_type, checkout) for event_type in CHECKOUT_SESSION_EVENT_TYPES),
        (ACCOUNT_REQUIREMENTS_UPDATED, AccountRequirementsHandler(fetcher, merchants)),
        (ACCOUNT_CAPABILITY_STATUS_UPDATED, AccountCapabilityHandler(fetcher, merchants)),
    ]


def mollie_handlers(orders: OrderGateway, fetcher: ResourceFetcher) -> HandlerTable:
    # refund.updated / subscription.updated are stored but deliberately unhandled.
    return [
        (PAYMENT_UPDATED, MolliePaymentHandler(fetcher, orders)),
    ]
