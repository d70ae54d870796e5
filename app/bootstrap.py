"""Composition root: builds Store, Queue, Registry and Pipeline handles for every category."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncEngine

from app.application.handler_registry import build_registry
from app.application.pipeline import EventPipeline, build_pipeline
from app.config.settings import AppSettings
from app.domain.models.event import EventCategory
from app.handlers.tables import mollie_handlers, stripe_handlers
from app.infrastructure.cache.event_queue_redis import RedisEventQueue
from app.infrastructure.cache.redis_client import RedisClient
from app.infrastructure.database.event_store_db import DbEventStore
from app.infrastructure.database.gateways import DbMerchantGateway, DbOrderGateway
from app.infrastructure.database.models import EVENT_TABLES
from app.infrastructure.database.session import create_engine, create_session_factory
from app.infrastructure.http.resource_fetcher import (
    MOLLIE_RESOURCE_PATHS,
    STRIPE_RESOURCE_PATHS,
    HttpResourceFetcher,
)
from app.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)


@dataclass
class Container:
    settings: AppSettings
    engine: AsyncEngine
    redis: RedisClient
    metrics: MetricsCollector
    pipelines: Dict[str, EventPipeline]
    fetchers: List[HttpResourceFetcher] = field(default_factory=list)

    async def aclose(self) -> None:
        for fetcher in self.fetchers:
            await fetcher.aclose()
        await self.redis.close()
        await self.engine.dispose()


def build_container(settings: AppSettings) -> Container:
    engine = create_engine(settings.database_url, echo=settings.debug)
    session_factory = create_session_factory(engine)
    redis_client = RedisClient(settings.redis_url)
    metrics = MetricsCollector()

    orders = DbOrderGateway(session_factory)
    merchants = DbMerchantGateway(session_factory)
    stripe_fetcher = HttpResourceFetcher(
        base_url=settings.provider_api_base_url_stripe,
        api_key=settings.stripe_api_key,
        paths=STRIPE_RESOURCE_PATHS,
        timeout_seconds=settings.provider_api_timeout_seconds,
    )
    mollie_fetcher = HttpResourceFetcher(
        base_url=settings.provider_api_base_url_mollie,
        api_key=settings.mollie_api_key,
        paths=MOLLIE_RESOURCE_PATHS,
        timeout_seconds=settings.provider_api_timeout_seconds,
    )

    handler_tables = {
        EventCategory.STRIPE: stripe_handlers(orders, merchants, stripe_fetcher),
        EventCategory.MOLLIE: mollie_handlers(orders, mollie_fetcher),
    }

    pipelines: Dict[str, EventPipeline] = {}
    for category in EventCategory:
        pipelines[category.value] = build_pipeline(
            category=category.value,
            store=DbEventStore(session_factory, EVENT_TABLES[category]),
            queue=RedisEventQueue(redis_client, category.value),
            registry=build_registry(handler_tables[category], name=category.value),
            max_retries=settings.max_retries,
            dispatch_timeout_seconds=settings.dispatch_timeout_seconds,
            metrics=metrics,
        )

    logger.info("container_built", extra={"categories": sorted(pipelines)})
    return Container(
        settings=settings,
        engine=engine,
        redis=redis_client,
        metrics=metrics,
        pipelines=pipelines,
        fetchers=[stripe_fetcher, mollie_fetcher],
    )
