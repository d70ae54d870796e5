"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SignatureVerificationError(SecurityError):
    """Raised when a webhook signature header is missing, malformed, stale or does not match."""


class WebhookNotConfiguredError(SecurityError):
    """Raised when the shared secret for a webhook endpoint is not configured."""
