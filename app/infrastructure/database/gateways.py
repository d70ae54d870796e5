"""DB-backed order and merchant gateways used by payment handlers."""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import func

from app.application.exceptions import OrderNotFoundError
from app.domain.status_mapper import (
    CapabilityStatus,
    PaymentStatus,
    PaymentStatusMapping,
    RequirementsStatus,
)
from app.infrastructure.database.models import Merchant, Order

logger = logging.getLogger(__name__)


class DbOrderGateway:
    """Implements OrderGateway. Writes only when the payment status actually changes."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def apply_payment_status(self, order_id: str, mapping: PaymentStatusMapping) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(select(Order.payment_status).where(Order.id == order_id))
            row = result.first()
            if row is None:
                raise OrderNotFoundError(f"Order {order_id} not found")
            if row.payment_status == mapping.payment_status.value:
                return False

            values = {
                "status": mapping.order_status.value,
                "payment_status": mapping.payment_status.value,
            }
            if mapping.payment_status == PaymentStatus.PAID:
                values["confirmed_at"] = func.now()
            await session.execute(update(Order).where(Order.id == order_id).values(**values))
            await session.commit()
        logger.info(
            "order_payment_status_updated",
            extra={
                "order_id": order_id,
                "order_status": mapping.order_status.value,
                "payment_status": mapping.payment_status.value,
            },
        )
        return True


class DbMerchantGateway:
    """Implements MerchantGateway, keyed by the provider account id."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _update(self, account_id: str, **values) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                update(Merchant)
                .where(Merchant.payment_account_id == account_id)
                .values(**values)
                .returning(Merchant.id)
            )
            merchant_id = result.scalar_one_or_none()
            await session.commit()
        if merchant_id is None:
            logger.warning("merchant_not_found", extra={"account_id": account_id})
            return False
        logger.info(
            "merchant_payment_status_updated",
            extra={"merchant_id": merchant_id, "account_id": account_id, **values},
        )
        return True

    async def update_requirements_status(self, account_id: str, status: RequirementsStatus) -> bool:
        return await self._update(account_id, requirements_status=status.value)

    async def update_capabilities_status(self, account_id: str, status: CapabilityStatus) -> bool:
        return await self._update(account_id, capabilities_status=status.value)
