"""Connected-account handlers (thin events): re-fetch the account, map its statuses, store them."""

import logging

from app.application.gateways import MerchantGateway, ResourceFetcher
from app.application.handler_registry import HandlerInput, HandlerResult
from app.domain.models.event import ThinEventReference
from app.domain.schemas.event import ProviderAccount, parse_model
from app.domain.status_mapper import map_capability_status, map_requirements_status

logger = logging.getLogger(__name__)

ACCOUNT_REQUIREMENTS_UPDATED = "v2.core.account[requirements].updated"
ACCOUNT_CAPABILITY_STATUS_UPDATED = "v2.core.account[configuration.merchant].capability_status_updated"
ACCOUNT_RESOURCE_TYPE = "v2.core.account"


async def _fetch_account(fetcher: ResourceFetcher, event: ThinEventReference) -> ProviderAccount:
    resource_type = event.related_object_type or ACCOUNT_RESOURCE_TYPE
    return parse_model(ProviderAccount, await fetcher.fetch(resource_type, event.related_object_id))


def _without_reference(event: HandlerInput) -> HandlerResult:
    logger.warning(
        "account_event_without_reference",
        extra={"event_id": event.event_id, "event_type": event.event_type},
    )
    return HandlerResult.ok("No related_object reference; nothing to fetch")


class AccountRequirementsHandler:
    def __init__(self, fetcher: ResourceFetcher, merchants: MerchantGateway) -> None:
        self._fetcher = fetcher
        self._merchants = merchants

    async def __call__(self, event: HandlerInput) -> HandlerResult:
        if not isinstance(event, ThinEventReference):
            return _without_reference(event)
        account = await _fetch_account(self._fetcher, event)
        status = map_requirements_status(account.requirements_status)
        found = await self._merchants.update_requirements_status(account.id, status)
        if not found:
            return HandlerResult.ok(f"No merchant for account {account.id}")
        return HandlerResult.ok(f"requirements_status={status.value}")


class AccountCapabilityHandler:
    def __init__(
        self,
        fetcher: ResourceFetcher,
        merchants: MerchantGateway,
        capability: str = "card_payments",
    ) -> None:
        self._fetcher = fetcher
        self._merchants = merchants
        self._capability = capability

    async def __call__(self, event: HandlerInput) -> HandlerResult:
        if not isinstance(event, ThinEventReference):
            return _without_reference(event)
        account = await _fetch_account(self._fetcher, event)
        status = map_capability_status(account.capability_status(self._capability))
        found = await self._merchants.update_capabilities_status(account.id, status)
        if not found:
            return HandlerResult.ok(f"No merchant for account {account.id}")
        return HandlerResult.ok(f"capabilities_status={status.value}")
