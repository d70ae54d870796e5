"""Business handlers, one module per handler, plus the static tables that register them."""

from app.handlers.account_status import (
    ACCOUNT_CAPABILITY_STATUS_UPDATED,
    ACCOUNT_REQUIREMENTS_UPDATED,
    AccountCapabilityHandler,
    AccountRequirementsHandler,
)
from app.handlers.checkout_session import CHECKOUT_SESSION_EVENT_TYPES, CheckoutSessionHandler
from app.handlers.mollie_payment import PAYMENT_UPDATED, MolliePaymentHandler
from app.handlers.order_payment import OrderPaymentHandler, apply_provider_payment_status
from app.handlers.tables import mollie_handlers, stripe_handlers

__all__ = [
    "ACCOUNT_CAPABILITY_STATUS_UPDATED",
    "ACCOUNT_REQUIREMENTS_UPDATED",
    "CHECKOUT_SESSION_EVENT_TYPES",
    "PAYMENT_UPDATED",
    "AccountCapabilityHandler",
    "AccountRequirementsHandler",
    "CheckoutSessionHandler",
    "MolliePaymentHandler",
    "OrderPaymentHandler",
    "apply_provider_payment_status",
    "mollie_handlers",
    "stripe_handlers",
]
