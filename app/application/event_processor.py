"""
Event processor and worker loop.

Per event id: DEQUEUED -> LOADING -> DISPATCHING -> {PROCESSED, RETRY_SCHEDULED, DEAD_LETTERED}.
Retries are self-requeued onto the tail of the main queue; after max_retries failed
attempts the id moves to the dead-letter list and the row is marked FAILED for good.
Delivery to handlers is at-least-once.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from app.application.event_queue import EventQueue
from app.application.event_store import EventStore
from app.application.exceptions import (
    DeadLetterIncompleteError,
    DispatchTimeoutError,
    EventStoreUnavailableError,
    HandlerFailedError,
)
from app.application.handler_registry import HANDLER_NOT_FOUND, HandlerRegistry
from app.core.context import event_id_ctx
from app.domain.models.event import ProcessingStatus, StoredEvent, classify_event, to_handler_input
from app.observability.failure_classifier import FailureClassifier
from app.observability.metrics import MetricsCollector

DEFAULT_MAX_RETRIES = 3
DEFAULT_DISPATCH_TIMEOUT_SECONDS = 30.0
DEFAULT_BACKOFF_SECONDS = 5.0


class ProcessingOutcome(str, Enum):
    PROCESSED = "processed"
    RETRY_SCHEDULED = "retry_scheduled"
    DEAD_LETTERED = "dead_lettered"
    SKIPPED = "skipped"  # already PROCESSED or FAILED; redundant queue entry
    NOT_FOUND = "not_found"  # id on the queue but no row in the store


class EventProcessor:
    """
    Processes one event id end to end. Handler errors (raised, explicit failure, or timeout)
    feed the retry path and never escape. Store and queue errors do escape: the worker loop
    treats them as infrastructure failures.
    """

    def __init__(
        self,
        store: EventStore,
        queue: EventQueue,
        registry: HandlerRegistry,
        logger: logging.Logger,
        max_retries: int = DEFAULT_MAX_RETRIES,
        dispatch_timeout_seconds: Optional[float] = DEFAULT_DISPATCH_TIMEOUT_SECONDS,
        category: str = "default",
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._store = store
        self._queue = queue
        self._registry = registry
        self._logger = logger
        self._max_retries = max_retries
        self._dispatch_timeout = dispatch_timeout_seconds
        self._category = category
        self._metrics = metrics

    @property
    def max_retries(self) -> int:
        return self._max_retries

    async def process(self, event_id: str) -> ProcessingOutcome:
        token = event_id_ctx.set(event_id)
        try:
            return await self._process(event_id)
        finally:
            event_id_ctx.reset(token)

    async def _process(self, event_id: str) -> ProcessingOutcome:
        # LOADING
        event = await self._store.get_by_id(event_id)
        if event is None:
            self._logger.warning(
                "event_not_found",
                extra={"category": self._category, "event_id": event_id},
            )
            self._count("events_not_found")
            return ProcessingOutcome.NOT_FOUND

        if event.processing_status == ProcessingStatus.PROCESSED:
            self._logger.info(
                "event_already_processed",
                extra={"category": self._category, "event_id": event_id},
            )
            self._count("events_skipped")
            return ProcessingOutcome.SKIPPED

        # Dead-lettered events are never retried automatically.
        if event.processing_status == ProcessingStatus.FAILED:
            self._logger.info(
                "event_already_failed",
                extra={"category": self._category, "event_id": event_id, "retry_count": event.retry_count},
            )
            self._count("events_skipped")
            return ProcessingOutcome.SKIPPED

        # DISPATCHING
        started = time.monotonic()
        try:
            await self._dispatch(event)
        except Exception as e:
            return await self._handle_failure(event, e)
        finally:
            if self._metrics is not None:
                self._metrics.observe_latency(
                    "event_dispatch_latency",
                    (time.monotonic() - started) * 1000,
                    category=self._category,
                )

        await self._store.mark_processed(event_id)
        self._logger.info(
            "event_processed",
            extra={"category": self._category, "event_id": event_id, "event_type": event.event_type},
        )
        self._count("events_processed")
        return ProcessingOutcome.PROCESSED

    async def _dispatch(self, event: StoredEvent) -> None:
        handler_input = to_handler_input(event)
        dispatch = self._registry.dispatch(event.event_type, handler_input)
        try:
            if self._dispatch_timeout:
                outcome = await asyncio.wait_for(dispatch, timeout=self._dispatch_timeout)
            else:
                outcome = await dispatch
        except asyncio.TimeoutError as e:
            raise DispatchTimeoutError(
                f"Handler for {event.event_type} exceeded {self._dispatch_timeout}s"
            ) from e

        if outcome is HANDLER_NOT_FOUND:
            self._logger.debug(
                "event_unhandled",
                extra={
                    "category": self._category,
                    "event_id": event.event_id,
                    "event_type": event.event_type,
                    "shape": classify_event(event).value,
                },
            )
            self._count("events_unhandled")
            return
        if not outcome.success:
            raise HandlerFailedError(outcome.detail or "Handler reported failure")

    async def _handle_failure(self, event: StoredEvent, error: Exception) -> ProcessingOutcome:
        event_id = event.event_id
        failure_category = FailureClassifier.classify(error)
        retry_count = await self._store.get_retry_count(event_id)

        if retry_count < self._max_retries:
            new_count = await self._store.increment_retry(event_id)
            await self._queue.push(event_id)
            self._logger.warning(
                "event_retry_scheduled",
                extra={
                    "category": self._category,
                    "event_id": event_id,
                    "event_type": event.event_type,
                    "retry_count": new_count,
                    "max_retries": self._max_retries,
                    "failure": failure_category.value,
                    "error": str(error),
                },
            )
            self._count("events_retried")
            return ProcessingOutcome.RETRY_SCHEDULED

        await self._queue.push_dead_letter(event_id)
        try:
            await self._store.mark_failed(event_id)
        except EventStoreUnavailableError as e:
            # The id is already parked on the dead-letter queue; it must not go back to main.
            raise DeadLetterIncompleteError(
                f"Event {event_id} dead-lettered but not marked FAILED: {e.message}"
            ) from e
        self._logger.error(
            "event_dead_lettered",
            extra={
                "category": self._category,
                "event_id": event_id,
                "event_type": event.event_type,
                "retry_count": retry_count,
                "failure": failure_category.value,
                "error": str(error),
            },
        )
        self._count("events_dead_lettered")
        return ProcessingOutcome.DEAD_LETTERED

    def _count(self, name: str) -> None:
        if self._metrics is not None:
            self._metrics.increment(name, category=self._category)


class WorkerLoop:
    """
    Single long-running consumer of one category's queue. The blocking pop is the idle state.
    Infrastructure errors are logged, the popped id is pushed back, and the loop sleeps
    backoff_seconds before resuming; it only exits through stop() or cancellation.
    """

    def __init__(
        self,
        queue: EventQueue,
        processor: EventProcessor,
        logger: logging.Logger,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        pop_timeout: int = 0,
        category: str = "default",
        metrics: Optional[MetricsCollector] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._queue = queue
        self._processor = processor
        self._logger = logger
        self._backoff = backoff_seconds
        self._pop_timeout = pop_timeout
        self._category = category
        self._metrics = metrics
        self._sleep = sleep
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def run_once(self) -> Optional[ProcessingOutcome]:
        """One iteration. Returns None when the pop timed out with nothing to do."""
        event_id = await self._queue.pop(timeout=self._pop_timeout)
        if event_id is None:
            return None
        try:
            return await self._processor.process(event_id)
        except DeadLetterIncompleteError:
            raise
        except Exception:
            await self._requeue(event_id)
            raise

    async def run(self) -> None:
        self._running = True
        self._logger.info("worker_started", extra={"category": self._category})
        try:
            while self._running:
                try:
                    await self.run_once()
                except Exception as e:
                    self._logger.error(
                        "worker_loop_error",
                        extra={
                            "category": self._category,
                            "failure": FailureClassifier.classify(e).value,
                            "error": str(e),
                            "backoff_seconds": self._backoff,
                        },
                        exc_info=True,
                    )
                    if self._metrics is not None:
                        self._metrics.increment("worker_loop_errors", category=self._category)
                    await self._sleep(self._backoff)
        finally:
            self._running = False
            self._logger.info("worker_stopped", extra={"category": self._category})

    def stop(self) -> None:
        """Ask the loop to exit after the current iteration."""
        self._running = False

    async def _requeue(self, event_id: str) -> None:
        try:
            await self._queue.push(event_id)
        except Exception as e:
            self._logger.error(
                "event_requeue_failed",
                extra={"category": self._category, "event_id": event_id, "error": str(e)},
            )
