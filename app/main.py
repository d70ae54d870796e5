# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api.middleware import CorrelationIdMiddleware, RequestAuditMiddleware
from app.api.routers import health, operations, webhooks
from app.application.exceptions import (
    ApplicationError,
    EventStoreUnavailableError,
    QueueUnavailableError,
)
from app.bootstrap import build_container
from app.config.logging import configure_logging
from app.config.settings import get_settings
from app.domain.exceptions import DomainError, DomainValidationError, MalformedPayloadError
from app.security.exceptions import SignatureVerificationError, WebhookNotConfiguredError

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = build_container(get_settings())
    app.state.container = container
    try:
        yield
    finally:
        await container.aclose()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> RequestAudit.
app.add_middleware(RequestAuditMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(SignatureVerificationError)
async def signature_error_handler(request, exc: SignatureVerificationError):
    logger.warning("webhook_rejected", extra={"path": request.url.path, "reason": exc.message})
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(WebhookNotConfiguredError)
async def not_configured_error_handler(request, exc: WebhookNotConfiguredError):
    logger.error("webhook_not_configured", extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(MalformedPayloadError)
async def malformed_payload_error_handler(request, exc: MalformedPayloadError):
    logger.warning("webhook_rejected", extra={"path": request.url.path, "reason": exc.message})
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(EventStoreUnavailableError)
@app.exception_handler(QueueUnavailableError)
async def infrastructure_error_handler(request, exc: ApplicationError):
    # 5xx: the provider re-delivers later.
    logger.error("infrastructure_unavailable", extra={"path": request.url.path, "error": exc.message})
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    logger.error("unexpected_error", extra={"path": request.url.path}, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /webhooks, /operations
app.include_router(health.router)
app.include_router(webhooks.router, prefix="/webhooks")
app.include_router(operations.router, prefix="/operations")
