"""
Webhook signature verification over the raw request body. HMAC-SHA256 via cryptography,
constant-time comparison. No global state: secrets are passed in.
"""

import time
from typing import Callable, List, Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from app.security.exceptions import SignatureVerificationError, WebhookNotConfiguredError

STRIPE_SIGNATURE_HEADER = "Stripe-Signature"
MOLLIE_SIGNATURE_HEADER = "X-Mollie-Signature"
STRIPE_SIGNATURE_SCHEME = "v1"
MOLLIE_SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, message: bytes) -> str:
    """Hex HMAC-SHA256 of message under secret."""
    h = hmac.HMAC(secret.encode("utf-8"), hashes.SHA256())
    h.update(message)
    return h.finalize().hex()


def _matches(secret: str, message: bytes, signature_hex: str) -> bool:
    try:
        expected = bytes.fromhex(signature_hex)
    except ValueError:
        return False
    h = hmac.HMAC(secret.encode("utf-8"), hashes.SHA256())
    h.update(message)
    try:
        h.verify(expected)
    except InvalidSignature:
        return False
    return True


def _require_secret(secret: Optional[str]) -> str:
    if not secret or not secret.strip():
        raise WebhookNotConfiguredError("Webhook not configured")
    return secret


def _parse_stripe_header(header: str) -> Tuple[int, List[str]]:
    timestamp: Optional[int] = None
    signatures: List[str] = []
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError as e:
                raise SignatureVerificationError("Invalid signature timestamp") from e
        elif key == STRIPE_SIGNATURE_SCHEME:
            signatures.append(value)
    if timestamp is None:
        raise SignatureVerificationError("Signature header has no timestamp")
    if not signatures:
        raise SignatureVerificationError(f"Signature header has no {STRIPE_SIGNATURE_SCHEME} signature")
    return timestamp, signatures


class StripeSignatureVerifier:
    """
    Verifies `Stripe-Signature: t=<unix>,v1=<hex>[,v1=<hex>]`: HMAC-SHA256 over "<t>.<body>".
    Rejects timestamps older than tolerance_seconds (0 disables the check).
    """

    def __init__(
        self,
        secret: Optional[str],
        tolerance_seconds: int = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._tolerance = tolerance_seconds
        self._clock = clock

    def verify(self, raw_body: bytes, header: Optional[str]) -> None:
        secret = _require_secret(self._secret)
        if not header:
            raise SignatureVerificationError(f"Missing {STRIPE_SIGNATURE_HEADER} header")
        timestamp, signatures = _parse_stripe_header(header)
        signed_payload = f"{timestamp}.".encode("utf-8") + raw_body
        if not any(_matches(secret, signed_payload, sig) for sig in signatures):
            raise SignatureVerificationError("Invalid signature")
        if self._tolerance and self._clock() - timestamp > self._tolerance:
            raise SignatureVerificationError("Signature timestamp outside tolerance")

    def sign(self, raw_body: bytes, timestamp: Optional[int] = None) -> str:
        """Build a header for raw_body (used by tests and local replay tooling)."""
        secret = _require_secret(self._secret)
        timestamp = int(self._clock()) if timestamp is None else timestamp
        signature = compute_signature(secret, f"{timestamp}.".encode("utf-8") + raw_body)
        return f"t={timestamp},{STRIPE_SIGNATURE_SCHEME}={signature}"


class MollieSignatureVerifier:
    """Verifies `X-Mollie-Signature: sha256=<hex>`: HMAC-SHA256 over the raw body."""

    def __init__(self, secret: Optional[str]) -> None:
        self._secret = secret

    def verify(self, raw_body: bytes, header: Optional[str]) -> None:
        secret = _require_secret(self._secret)
        if not header:
            raise SignatureVerificationError(f"Missing {MOLLIE_SIGNATURE_HEADER} header")
        signature = header.strip()
        if signature.startswith(MOLLIE_SIGNATURE_PREFIX):
            signature = signature[len(MOLLIE_SIGNATURE_PREFIX):]
        if not _matches(secret, raw_body, signature):
            raise SignatureVerificationError("Invalid signature")

    def sign(self, raw_body: bytes) -> str:
        return MOLLIE_SIGNATURE_PREFIX + compute_signature(_require_secret(self._secret), raw_body)
