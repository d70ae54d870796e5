"""Collaborator protocols used by business handlers. Infrastructure implements them."""

from typing import Any, Dict, Protocol

from app.domain.status_mapper import CapabilityStatus, PaymentStatusMapping, RequirementsStatus


class OrderGateway(Protocol):
    async def apply_payment_status(self, order_id: str, mapping: PaymentStatusMapping) -> bool:
        """
        Write the mapped (order, payment) status. Returns False when the order already has
        that payment status. Raises OrderNotFoundError for unknown orders.
        """
        ...


class MerchantGateway(Protocol):
    async def update_requirements_status(self, account_id: str, status: RequirementsStatus) -> bool:
        """Returns False when no merchant owns account_id."""
        ...

    async def update_capabilities_status(self, account_id: str, status: CapabilityStatus) -> bool:
        """Returns False when no merchant owns account_id."""
        ...


class ResourceFetcher(Protocol):
    async def fetch(self, resource_type: str, resource_id: str) -> Dict[str, Any]:
        """Current state of a provider resource. Raises ResourceFetchError."""
        ...
