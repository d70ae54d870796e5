"""Field extraction from provider payloads and event id synthesis. Pure functions."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

# Mollie resource ids carry their type as a prefix.
MOLLIE_RESOURCE_PREFIXES: Dict[str, str] = {
    "tr_": "payment",
    "re_": "refund",
    "sub_": "subscription",
    "mdt_": "mandate",
}


def extract_related_object(payload: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """
    (object id, object type) for correlation. Snapshot events carry data.object.{id,object};
    thin events carry related_object.{id,type}.
    """
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("object"), dict):
        obj = data["object"]
        return obj.get("id"), obj.get("object")

    related = payload.get("related_object")
    if isinstance(related, dict):
        return related.get("id"), related.get("type")

    return None, None


def resource_type_from_id(resource_id: str) -> Optional[str]:
    for prefix, resource_type in MOLLIE_RESOURCE_PREFIXES.items():
        if resource_id.startswith(prefix):
            return resource_type
    return None


def synthesize_event_id(resource_id: str, now: Optional[datetime] = None) -> str:
    """
    Event id for providers without stable event ids: resource id plus epoch milliseconds.
    Two notifications for one resource within the same millisecond collapse into one event.
    """
    now = now or datetime.now(timezone.utc)
    return f"{resource_id}_{int(now.timestamp() * 1000)}"
