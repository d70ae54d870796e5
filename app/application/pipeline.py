"""One event pipeline per category: store + queue + registry + ingestion + processor."""

import logging
from dataclasses import dataclass
from typing import Optional

from app.application.event_processor import (
    DEFAULT_BACKOFF_SECONDS,
    DEFAULT_DISPATCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_RETRIES,
    EventProcessor,
    WorkerLoop,
)
from app.application.event_queue import EventQueue
from app.application.event_store import EventStore
from app.application.handler_registry import HandlerRegistry
from app.application.ingestion_service import IngestionService
from app.observability.metrics import MetricsCollector


@dataclass
class EventPipeline:
    category: str
    store: EventStore
    queue: EventQueue
    registry: HandlerRegistry
    ingestion: IngestionService
    processor: EventProcessor
    metrics: Optional[MetricsCollector] = None

    def worker(
        self,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        pop_timeout: int = 0,
    ) -> WorkerLoop:
        return WorkerLoop(
            queue=self.queue,
            processor=self.processor,
            logger=logging.getLogger(f"app.worker.{self.category}"),
            backoff_seconds=backoff_seconds,
            pop_timeout=pop_timeout,
            category=self.category,
            metrics=self.metrics,
        )


def build_pipeline(
    category: str,
    store: EventStore,
    queue: EventQueue,
    registry: HandlerRegistry,
    max_retries: int = DEFAULT_MAX_RETRIES,
    dispatch_timeout_seconds: Optional[float] = DEFAULT_DISPATCH_TIMEOUT_SECONDS,
    metrics: Optional[MetricsCollector] = None,
) -> EventPipeline:
    """Wire one category's components. Store and queue handles are injected, never global."""
    ingestion = IngestionService(
        store=store,
        queue=queue,
        logger=logging.getLogger(f"app.ingestion.{category}"),
        category=category,
        metrics=metrics,
    )
    processor = EventProcessor(
        store=store,
        queue=queue,
        registry=registry,
        logger=logging.getLogger(f"app.processor.{category}"),
        max_retries=max_retries,
        dispatch_timeout_seconds=dispatch_timeout_seconds,
        category=category,
        metrics=metrics,
    )
    return EventPipeline(
        category=category,
        store=store,
        queue=queue,
        registry=registry,
        ingestion=ingestion,
        processor=processor,
        metrics=metrics,
    )
