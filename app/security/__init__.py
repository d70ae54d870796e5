"""Security: webhook signature verification. No FastAPI."""

from app.security.exceptions import SecurityError, SignatureVerificationError, WebhookNotConfiguredError
from app.security.signatures import MollieSignatureVerifier, StripeSignatureVerifier

__all__ = [
    "MollieSignatureVerifier",
    "SecurityError",
    "SignatureVerificationError",
    "StripeSignatureVerifier",
    "WebhookNotConfiguredError",
]
