"""Ingestion service — store then enqueue. Orchestration only: no HTTP, no FastAPI, no direct infrastructure."""

import logging
from dataclasses import dataclass
from typing import Optional

from app.application.event_queue import EventQueue
from app.application.event_store import EventStore
from app.domain.models.event import IncomingEvent
from app.domain.validators.event_validator import validate_incoming_event
from app.observability.metrics import MetricsCollector


@dataclass(frozen=True)
class IngestionOutcome:
    event_id: str
    is_new: bool
    enqueued: bool
    error: Optional[str] = None


class IngestionService:
    """
    Transaction strategy: the Event Store insert is primary and is the only deduplication in
    the pipeline. A store failure propagates (caller answers 5xx so the provider re-delivers).
    A queue failure after a successful insert is reported in the outcome, not raised.
    """

    def __init__(
        self,
        store: EventStore,
        queue: EventQueue,
        logger: logging.Logger,
        category: str = "default",
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._store = store
        self._queue = queue
        self._logger = logger
        self._category = category
        self._metrics = metrics

    async def ingest(self, event: IncomingEvent) -> IngestionOutcome:
        validate_incoming_event(event)

        # Step 1: idempotent insert (primary source of truth)
        result = await self._store.ingest(event)
        if not result.is_new:
            self._logger.info(
                "event_duplicate",
                extra={"category": self._category, "event_id": event.event_id, "event_type": event.event_type},
            )
            self._count("events_duplicate")
            return IngestionOutcome(event_id=result.event_id, is_new=False, enqueued=False)

        self._logger.info(
            "event_ingested",
            extra={
                "category": self._category,
                "event_id": event.event_id,
                "event_type": event.event_type,
                "related_object_id": event.related_object_id,
            },
        )
        self._count("events_ingested")

        # Step 2: enqueue (only new rows; failure does not undo the insert)
        try:
            await self._queue.push(result.event_id)
        except Exception as e:
            self._logger.error(
                "event_enqueue_failed",
                extra={"category": self._category, "event_id": result.event_id, "error": str(e)},
            )
            self._count("events_enqueue_failed")
            return IngestionOutcome(
                event_id=result.event_id,
                is_new=True,
                enqueued=False,
                error=f"Enqueue failed: {e}",
            )

        self._logger.info(
            "event_enqueued",
            extra={"category": self._category, "event_id": result.event_id},
        )
        return IngestionOutcome(event_id=result.event_id, is_new=True, enqueued=True)

    def _count(self, name: str) -> None:
        if self._metrics is not None:
            self._metrics.increment(name, category=self._category)
