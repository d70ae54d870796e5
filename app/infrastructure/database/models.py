# app/infrastructure/database/models.py

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from app.domain.models.event import EventCategory, ProcessingStatus
from app.infrastructure.database.session import Base


class PaymentEventBase(Base):
    """Columns shared by every category's event table. Rows are never deleted."""

    __abstract__ = True

    id = Column(String(255), primary_key=True)
    event_type = Column(String(255), nullable=False, index=True)
    api_version = Column(String(64), nullable=True)
    provider_created_at = Column(DateTime(timezone=True), nullable=True)
    account_id = Column(String(255), nullable=True, index=True)
    related_object_id = Column(String(255), nullable=True, index=True)
    related_object_type = Column(String(64), nullable=True)
    payload = Column(JSONB, nullable=False)
    processing_status = Column(
        String(16),
        nullable=False,
        default=ProcessingStatus.PENDING.value,
        server_default=ProcessingStatus.PENDING.value,
        index=True,
    )
    retry_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    processed_at = Column(DateTime(timezone=True), nullable=True)


class StripeEventRecord(PaymentEventBase):
    __tablename__ = "stripe_events"


class MollieEventRecord(PaymentEventBase):
    __tablename__ = "mollie_events"


EVENT_TABLES = {
    EventCategory.STRIPE: StripeEventRecord,
    EventCategory.MOLLIE: MollieEventRecord,
}


class Order(Base):
    """Platform orders table; only the columns payment handlers write."""

    __tablename__ = "orders"

    id = Column(String, primary_key=True)
    status = Column(String, nullable=False)
    payment_status = Column(String, nullable=False)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Merchant(Base):
    """Platform merchants table; only the payment-account status columns."""

    __tablename__ = "merchants"

    id = Column(String, primary_key=True)
    payment_account_id = Column(String, nullable=True, unique=True, index=True)
    requirements_status = Column(String, nullable=False, default="none")
    capabilities_status = Column(String, nullable=False, default="pending")
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
