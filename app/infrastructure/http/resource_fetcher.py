"""Re-fetches provider resources for thin events over the provider's REST API (httpx)."""

from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from app.application.exceptions import ResourceFetchError

# resource type -> (path, query params)
STRIPE_RESOURCE_PATHS: Dict[str, Tuple[str, Dict[str, Any]]] = {
    "v2.core.account": (
        "/v2/core/accounts",
        {"include": ["configuration.merchant", "requirements"]},
    ),
    "account": ("/v1/accounts", {}),
    "checkout.session": ("/v1/checkout/sessions", {}),
}

MOLLIE_RESOURCE_PATHS: Dict[str, Tuple[str, Dict[str, Any]]] = {
    "payment": ("/v2/payments", {}),
    "refund": ("/v2/refunds", {}),
    "subscription": ("/v2/subscriptions", {}),
}


class HttpResourceFetcher:
    """Implements ResourceFetcher. Bearer-token GET {base_url}{path}/{id}."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        paths: Mapping[str, Tuple[str, Dict[str, Any]]],
        timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._paths = dict(paths)
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)

    async def fetch(self, resource_type: str, resource_id: str) -> Dict[str, Any]:
        if resource_type not in self._paths:
            raise ResourceFetchError(f"No API path for resource type {resource_type!r}")
        if not self._api_key:
            raise ResourceFetchError("Provider API key not configured")
        path, params = self._paths[resource_type]
        try:
            response = await self._client.get(
                f"{path}/{resource_id}",
                params=params or None,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ResourceFetchError(
                f"Fetching {resource_type} {resource_id} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ResourceFetchError(f"Fetching {resource_type} {resource_id} failed: {e}") from e
        body = response.json()
        if not isinstance(body, dict):
            raise ResourceFetchError(f"Unexpected {resource_type} response shape")
        return body

    async def aclose(self) -> None:
        await self._client.aclose()
