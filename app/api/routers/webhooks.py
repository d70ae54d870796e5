"""Webhook ingestion: verify signature over the raw body, parse, store once, enqueue new ids."""

import json
import logging
from datetime import datetime, timezone
from typing import Annotated, Any, Dict
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Request, Response

from app.api.dependencies import (
    get_mollie_pipeline,
    get_mollie_verifier,
    get_stripe_pipeline,
    get_stripe_thin_verifier,
    get_stripe_verifier,
)
from app.application.pipeline import EventPipeline
from app.domain.exceptions import MalformedPayloadError
from app.domain.extraction import extract_related_object, resource_type_from_id, synthesize_event_id
from app.domain.models.event import IncomingEvent
from app.domain.schemas.event import (
    MollieNotification,
    StripeSnapshotEvent,
    ThinEventPayload,
    WebhookAck,
    parse_model,
)
from app.security.signatures import (
    MOLLIE_SIGNATURE_HEADER,
    STRIPE_SIGNATURE_HEADER,
    MollieSignatureVerifier,
    StripeSignatureVerifier,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Mandates are settled through the first payment's webhook.
MOLLIE_SKIPPED_RESOURCES = frozenset({"mandate"})


def _ack(ack: WebhookAck) -> Response:
    return Response(content=ack.model_dump_json(exclude_none=True), media_type="application/json")


def _parse_json(raw_body: bytes) -> Dict[str, Any]:
    try:
        body = json.loads(raw_body)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedPayloadError("Invalid JSON payload") from e
    if not isinstance(body, dict):
        raise MalformedPayloadError("Invalid JSON payload")
    return body


def _parse_form(raw_body: bytes) -> Dict[str, str]:
    try:
        fields = parse_qs(raw_body.decode("utf-8"), strict_parsing=False)
    except UnicodeDecodeError as e:
        raise MalformedPayloadError("Invalid form data") from e
    return {key: values[0] for key, values in fields.items() if values}


def _snapshot_to_incoming(event: StripeSnapshotEvent, body: Dict[str, Any]) -> IncomingEvent:
    object_id, object_type = extract_related_object(body)
    return IncomingEvent(
        event_id=event.id,
        event_type=event.type,
        payload=body,
        provider_created_at=event.created,
        api_version=event.api_version,
        account_id=event.account,
        related_object_id=object_id,
        related_object_type=object_type,
    )


def _thin_to_incoming(event: ThinEventPayload, body: Dict[str, Any]) -> IncomingEvent:
    object_id, object_type = extract_related_object(body)
    return IncomingEvent(
        event_id=event.id,
        event_type=event.type,
        payload=body,
        provider_created_at=event.created,
        api_version=None,  # thin events carry no API version
        account_id=event.related_object.id if event.related_object else None,
        related_object_id=object_id,
        related_object_type=object_type,
    )


def _mollie_to_incoming(resource_id: str, resource_type: str) -> IncomingEvent:
    now = datetime.now(timezone.utc)
    return IncomingEvent(
        event_id=synthesize_event_id(resource_id, now),
        event_type=f"{resource_type}.updated",
        payload={"id": resource_id, "related_object": {"id": resource_id, "type": resource_type}},
        provider_created_at=now,
        related_object_id=resource_id,
        related_object_type=resource_type,
    )


async def _ingest(pipeline: EventPipeline, event: IncomingEvent) -> Response:
    outcome = await pipeline.ingestion.ingest(event)
    if not outcome.is_new:
        return _ack(WebhookAck(duplicate=True))
    if outcome.error:
        # Stored but not queued: answer 200 so the provider does not retry-storm.
        return _ack(WebhookAck(error=outcome.error))
    return _ack(WebhookAck())


@router.post("/stripe", response_model=WebhookAck, response_model_exclude_none=True)
async def stripe_webhook(
    request: Request,
    verifier: Annotated[StripeSignatureVerifier, Depends(get_stripe_verifier)],
    pipeline: Annotated[EventPipeline, Depends(get_stripe_pipeline)],
):
    """Snapshot (V1) events: the full resource is embedded in data.object."""
    raw_body = await request.body()
    verifier.verify(raw_body, request.headers.get(STRIPE_SIGNATURE_HEADER))
    body = _parse_json(raw_body)
    event = parse_model(StripeSnapshotEvent, body)
    logger.info(
        "webhook_received",
        extra={"category": pipeline.category, "event_id": event.id, "event_type": event.type, "account": event.account},
    )
    return await _ingest(pipeline, _snapshot_to_incoming(event, body))


@router.post("/stripe/thin", response_model=WebhookAck, response_model_exclude_none=True)
async def stripe_thin_webhook(
    request: Request,
    verifier: Annotated[StripeSignatureVerifier, Depends(get_stripe_thin_verifier)],
    pipeline: Annotated[EventPipeline, Depends(get_stripe_pipeline)],
):
    """Thin (V2) events: only a related_object reference; handlers re-fetch full state."""
    raw_body = await request.body()
    verifier.verify(raw_body, request.headers.get(STRIPE_SIGNATURE_HEADER))
    body = _parse_json(raw_body)
    event = parse_model(ThinEventPayload, body)
    logger.info(
        "webhook_received",
        extra={"category": pipeline.category, "event_id": event.id, "event_type": event.type, "thin": True},
    )
    return await _ingest(pipeline, _thin_to_incoming(event, body))


@router.post("/mollie", response_model=WebhookAck, response_model_exclude_none=True)
async def mollie_webhook(
    request: Request,
    verifier: Annotated[MollieSignatureVerifier, Depends(get_mollie_verifier)],
    pipeline: Annotated[EventPipeline, Depends(get_mollie_pipeline)],
):
    """Mollie posts only `id=<resource id>`; the event id is synthesized from it."""
    raw_body = await request.body()
    verifier.verify(raw_body, request.headers.get(MOLLIE_SIGNATURE_HEADER))
    notification = parse_model(MollieNotification, _parse_form(raw_body))
    resource_id = notification.id

    resource_type = resource_type_from_id(resource_id)
    if resource_type is None:
        logger.warning("mollie_unknown_resource", extra={"resource_id": resource_id})
        return _ack(WebhookAck(skipped=True))
    if resource_type in MOLLIE_SKIPPED_RESOURCES:
        logger.debug(
            "mollie_resource_skipped",
            extra={"resource_id": resource_id, "resource_type": resource_type},
        )
        return _ack(WebhookAck(skipped=True))

    logger.info(
        "webhook_received",
        extra={"category": pipeline.category, "resource_id": resource_id, "resource_type": resource_type},
    )
    return await _ingest(pipeline, _mollie_to_incoming(resource_id, resource_type))
