"""Event processor: dispatch, bounded retries, dead-lettering, skip-if-processed."""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from app.application.event_processor import EventProcessor, ProcessingOutcome
from app.application.handler_registry import HandlerResult, build_registry
from app.domain.models.event import IncomingEvent, ProcessingStatus, SnapshotEvent, ThinEventReference
from app.observability.metrics import MetricsCollector


def _processor(store, queue, registry, **kwargs) -> EventProcessor:
    return EventProcessor(
        store=store,
        queue=queue,
        registry=registry,
        logger=logging.getLogger("test.processor"),
        category="stripe",
        **kwargs,
    )


async def _seed(store, event_id="evt_1", event_type="payment.succeeded", payload=None):
    await store.ingest(
        IncomingEvent(event_id=event_id, event_type=event_type, payload=payload or {"status": "paid"})
    )


async def _drain(processor, queue):
    outcomes = []
    while queue.items:
        outcomes.append(await processor.process(queue.items.popleft()))
    return outcomes


@pytest.mark.asyncio
async def test_successful_dispatch_marks_processed(fake_store, fake_queue):
    handler = AsyncMock(return_value=HandlerResult.ok())
    await _seed(fake_store)
    processor = _processor(fake_store, fake_queue, build_registry([("payment.succeeded", handler)]))

    outcome = await processor.process("evt_1")

    assert outcome is ProcessingOutcome.PROCESSED
    assert fake_store.rows["evt_1"].processing_status is ProcessingStatus.PROCESSED
    handler.assert_awaited_once()
    assert isinstance(handler.await_args.args[0], SnapshotEvent)


@pytest.mark.asyncio
async def test_always_failing_handler_dead_lettered_after_three_retries(fake_store, fake_queue):
    """Handler always raises: re-enqueued 3 times, then dead-lettered and FAILED, no 4th retry."""
    handler = AsyncMock(side_effect=RuntimeError("downstream broken"))
    metrics = MetricsCollector()
    await _seed(fake_store)
    processor = _processor(
        fake_store, fake_queue, build_registry([("payment.succeeded", handler)]), metrics=metrics
    )
    fake_queue.items.append("evt_1")

    outcomes = await _drain(processor, fake_queue)

    assert outcomes == [ProcessingOutcome.RETRY_SCHEDULED] * 3 + [ProcessingOutcome.DEAD_LETTERED]
    assert handler.await_count == 4
    assert fake_queue.pushes == 3
    assert fake_queue.dead_letters == ["evt_1"]
    row = fake_store.rows["evt_1"]
    assert row.retry_count == 3
    assert row.processing_status is ProcessingStatus.FAILED
    assert metrics.counter("events_dead_lettered", category="stripe") == 1


@pytest.mark.asyncio
async def test_explicit_failure_result_follows_retry_path(fake_store, fake_queue):
    handler = AsyncMock(return_value=HandlerResult.failed("order locked"))
    await _seed(fake_store)
    processor = _processor(fake_store, fake_queue, build_registry([("payment.succeeded", handler)]))

    outcome = await processor.process("evt_1")

    assert outcome is ProcessingOutcome.RETRY_SCHEDULED
    assert list(fake_queue.items) == ["evt_1"]
    assert fake_store.rows["evt_1"].processing_status is ProcessingStatus.PENDING


@pytest.mark.asyncio
async def test_retry_then_success(fake_store, fake_queue):
    handler = AsyncMock(side_effect=[RuntimeError("transient"), HandlerResult.ok()])
    await _seed(fake_store)
    processor = _processor(fake_store, fake_queue, build_registry([("payment.succeeded", handler)]))
    fake_queue.items.append("evt_1")

    outcomes = await _drain(processor, fake_queue)

    assert outcomes == [ProcessingOutcome.RETRY_SCHEDULED, ProcessingOutcome.PROCESSED]
    assert fake_store.rows["evt_1"].retry_count == 1
    assert fake_store.rows["evt_1"].processing_status is ProcessingStatus.PROCESSED
    assert fake_queue.dead_letters == []


@pytest.mark.asyncio
async def test_already_processed_event_is_skipped(fake_store, fake_queue):
    """Redundant queue entry for a PROCESSED event does not call the handler again."""
    handler = AsyncMock(return_value=HandlerResult.ok())
    await _seed(fake_store)
    await fake_store.mark_processed("evt_1")
    processor = _processor(fake_store, fake_queue, build_registry([("payment.succeeded", handler)]))

    outcome = await processor.process("evt_1")

    assert outcome is ProcessingOutcome.SKIPPED
    handler.assert_not_called()


@pytest.mark.asyncio
async def test_failed_event_is_skipped_without_second_dead_letter(fake_store, fake_queue):
    """A stray queue entry for a FAILED event neither dispatches nor dead-letters again."""
    handler = AsyncMock(return_value=HandlerResult.ok())
    await _seed(fake_store)
    await fake_store.mark_failed("evt_1")
    processor = _processor(fake_store, fake_queue, build_registry([("payment.succeeded", handler)]))

    outcome = await processor.process("evt_1")

    assert outcome is ProcessingOutcome.SKIPPED
    handler.assert_not_called()
    assert fake_queue.dead_letters == []
    assert fake_store.rows["evt_1"].processing_status is ProcessingStatus.FAILED


@pytest.mark.asyncio
async def test_missing_row_returns_not_found(fake_store, fake_queue):
    processor = _processor(fake_store, fake_queue, build_registry([]))
    assert await processor.process("evt_missing") is ProcessingOutcome.NOT_FOUND
    assert fake_queue.pushes == 0


@pytest.mark.asyncio
async def test_unhandled_type_marked_processed(fake_store, fake_queue):
    await _seed(fake_store, event_type="customer.created")
    processor = _processor(fake_store, fake_queue, build_registry([]))

    outcome = await processor.process("evt_1")

    assert outcome is ProcessingOutcome.PROCESSED
    assert fake_store.rows["evt_1"].processing_status is ProcessingStatus.PROCESSED


@pytest.mark.asyncio
async def test_dispatch_timeout_schedules_retry(fake_store, fake_queue):
    async def slow_handler(event):
        await asyncio.sleep(1)
        return HandlerResult.ok()

    await _seed(fake_store)
    processor = _processor(
        fake_store,
        fake_queue,
        build_registry([("payment.succeeded", slow_handler)]),
        dispatch_timeout_seconds=0.01,
    )

    outcome = await processor.process("evt_1")

    assert outcome is ProcessingOutcome.RETRY_SCHEDULED
    assert fake_store.rows["evt_1"].retry_count == 1


@pytest.mark.asyncio
async def test_thin_event_dispatched_as_reference(fake_store, fake_queue):
    handler = AsyncMock(return_value=HandlerResult.ok())
    event_type = "v2.core.account[requirements].updated"
    await _seed(
        fake_store,
        event_type=event_type,
        payload={"id": "evt_1", "related_object": {"id": "acct_1", "type": "v2.core.account"}},
    )
    processor = _processor(fake_store, fake_queue, build_registry([(event_type, handler)]))

    await processor.process("evt_1")

    handler_input = handler.await_args.args[0]
    assert isinstance(handler_input, ThinEventReference)
    assert handler_input.related_object_id == "acct_1"


@pytest.mark.asyncio
async def test_custom_max_retries(fake_store, fake_queue):
    handler = AsyncMock(side_effect=RuntimeError("boom"))
    await _seed(fake_store)
    processor = _processor(
        fake_store, fake_queue, build_registry([("payment.succeeded", handler)]), max_retries=1
    )
    fake_queue.items.append("evt_1")

    outcomes = await _drain(processor, fake_queue)

    assert outcomes == [ProcessingOutcome.RETRY_SCHEDULED, ProcessingOutcome.DEAD_LETTERED]
    assert processor.max_retries == 1
