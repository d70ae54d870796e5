"""Operational endpoints for monitoring: queue depths, registered handlers, metrics."""

from typing import Annotated, Dict, List

from fastapi import APIRouter, Depends

from app.api.dependencies import get_metrics, get_pipelines
from app.application.pipeline import EventPipeline
from app.domain.schemas.event import QueueDepthResponse, RegisteredHandlersResponse
from app.observability.metrics import MetricsCollector

router = APIRouter()


@router.get("/queues", response_model=List[QueueDepthResponse])
async def queue_depths(
    pipelines: Annotated[Dict[str, EventPipeline], Depends(get_pipelines)],
):
    """Main and dead-letter depth per category."""
    return [
        QueueDepthResponse(
            category=category,
            queue_depth=await pipeline.queue.depth(),
            dead_letter_depth=await pipeline.queue.dead_letter_depth(),
        )
        for category, pipeline in sorted(pipelines.items())
    ]


@router.get("/handlers", response_model=List[RegisteredHandlersResponse])
async def registered_handlers(
    pipelines: Annotated[Dict[str, EventPipeline], Depends(get_pipelines)],
):
    return [
        RegisteredHandlersResponse(
            category=category,
            event_types=pipeline.registry.list_registered_types(),
        )
        for category, pipeline in sorted(pipelines.items())
    ]


@router.get("/metrics")
async def metrics(
    collector: Annotated[MetricsCollector, Depends(get_metrics)],
):
    return collector.export_metrics()
