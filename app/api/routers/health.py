# app/api/routers/health.py
from typing import Annotated, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_pipelines
from app.application.exceptions import ApplicationError
from app.application.pipeline import EventPipeline
from app.config.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Liveness check with correlation ID from request state."""
    settings = get_settings()
    return {
        "status": "ok",
        "correlation_id": request.state.correlation_id,
        "environment": settings.environment,
        "version": settings.version,
    }


@router.get("/health/ready")
async def ready(
    request: Request,
    pipelines: Annotated[Dict[str, EventPipeline], Depends(get_pipelines)],
):
    """Readiness: every category's event store and queue answer a round-trip. 503 otherwise."""
    checks: Dict[str, Dict[str, str]] = {}
    healthy = True
    for category, pipeline in pipelines.items():
        result = {}
        for name, backend in (("store", pipeline.store), ("queue", pipeline.queue)):
            try:
                await backend.ping()
                result[name] = "ok"
            except ApplicationError as e:
                result[name] = e.message
                healthy = False
        checks[category] = result

    body = {
        "status": "ready" if healthy else "unavailable",
        "correlation_id": request.state.correlation_id,
        "checks": checks,
    }
    if not healthy:
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body
