"""DB-backed Event Store. One table per category (stripe_events, mollie_events)."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional, Type

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import func

from app.application.exceptions import EventStoreUnavailableError
from app.domain.models.event import IncomingEvent, IngestResult, ProcessingStatus, StoredEvent
from app.infrastructure.database.models import PaymentEventBase

logger = logging.getLogger(__name__)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DbEventStore:
    """
    Implements EventStore over PostgreSQL. Idempotency comes from INSERT ... ON CONFLICT DO
    NOTHING on the primary key; retries use an in-database increment. One short session per call.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model: Type[PaymentEventBase],
    ) -> None:
        self._session_factory = session_factory
        self._model = model

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as e:
            raise EventStoreUnavailableError(
                f"Event store {self._model.__tablename__} unavailable: {e}"
            ) from e

    def ingest_statement(self, event: IncomingEvent):
        """INSERT ... ON CONFLICT (id) DO NOTHING RETURNING id: a row comes back only if inserted."""
        m = self._model
        return (
            insert(m)
            .values(
                id=event.event_id,
                event_type=event.event_type,
                api_version=event.api_version,
                provider_created_at=event.provider_created_at,
                account_id=event.account_id,
                related_object_id=event.related_object_id,
                related_object_type=event.related_object_type,
                payload=event.payload,
                processing_status=ProcessingStatus.PENDING.value,
                retry_count=0,
            )
            .on_conflict_do_nothing(index_elements=[m.id])
            .returning(m.id)
        )

    def increment_statement(self, event_id: str):
        m = self._model
        return (
            update(m)
            .where(m.id == event_id)
            .values(retry_count=m.retry_count + 1)
            .returning(m.retry_count)
        )

    async def ingest(self, event: IncomingEvent) -> IngestResult:
        async with self._session() as session:
            result = await session.execute(self.ingest_statement(event))
            inserted = result.scalar_one_or_none()
            await session.commit()
        return IngestResult(is_new=inserted is not None, event_id=event.event_id)

    async def get_by_id(self, event_id: str) -> Optional[StoredEvent]:
        m = self._model
        async with self._session() as session:
            result = await session.execute(select(m).where(m.id == event_id))
            orm = result.scalar_one_or_none()
        if orm is None:
            return None
        return StoredEvent(
            event_id=orm.id,
            event_type=orm.event_type,
            payload=orm.payload or {},
            processing_status=ProcessingStatus(orm.processing_status),
            retry_count=orm.retry_count or 0,
            created_at=_aware(orm.created_at),
            processed_at=_aware(orm.processed_at),
            provider_created_at=_aware(orm.provider_created_at),
            api_version=orm.api_version,
            account_id=orm.account_id,
            related_object_id=orm.related_object_id,
            related_object_type=orm.related_object_type,
        )

    async def _set_status(self, event_id: str, status: ProcessingStatus) -> None:
        m = self._model
        async with self._session() as session:
            await session.execute(
                update(m)
                .where(m.id == event_id)
                .values(processing_status=status.value, processed_at=func.now())
            )
            await session.commit()

    async def mark_processed(self, event_id: str) -> None:
        await self._set_status(event_id, ProcessingStatus.PROCESSED)

    async def mark_failed(self, event_id: str) -> None:
        await self._set_status(event_id, ProcessingStatus.FAILED)

    async def increment_retry(self, event_id: str) -> int:
        async with self._session() as session:
            result = await session.execute(self.increment_statement(event_id))
            new_count = result.scalar_one_or_none()
            await session.commit()
        if new_count is None:
            logger.warning(
                "retry_increment_missing_row",
                extra={"table": self._model.__tablename__, "event_id": event_id},
            )
            return 0
        return new_count

    async def get_retry_count(self, event_id: str) -> int:
        m = self._model
        async with self._session() as session:
            result = await session.execute(select(m.retry_count).where(m.id == event_id))
            count = result.scalar_one_or_none()
        return count or 0

    async def ping(self) -> None:
        async with self._session() as session:
            await session.execute(select(1))
