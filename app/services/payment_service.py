# app/services/payment_service.py
import logging
import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.exceptions import AppError, ConflictError, NotFoundError, ValidationError
from app.db.models.order import OrderPaymentStatus, OrderStatus
from app.db.models.payment import PaymentStatus
from app.schemas.payment import PaymentCreateSchemas, PaymentSchemas
from app.services.order_service import OrderService, get_order_service

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, orders: OrderService):
        self.orders = orders
        self.notifier = orders.notifier

    async def create_payment(self, db: AsyncSession, payment_in: PaymentCreateSchemas) -> PaymentSchemas:
        order = await self.orders.get_order(db, payment_in.order_id)
        if order.status == OrderStatus.CANCELLED:
            raise ValidationError("Cannot pay for a cancelled order")
        if payment_in.amount <= 0:
            raise ValidationError("Payment amount must be positive")

        payment = await crud.payment.create(db, obj_in=payment_in)
        await db.commit()
        logger.info("Payment %s of %s (%s) registered for order %s",
                    payment.id, payment.amount, payment.method.value, order.order_number)
        return PaymentSchemas.model_validate(payment)

    async def confirm_payment(self, db: AsyncSession, payment_id: uuid.UUID) -> PaymentSchemas:
        payment = await crud.payment.get(db, payment_id)
        if not payment:
            raise NotFoundError("Payment not found")
        if payment.status != PaymentStatus.PENDING:
            raise ValidationError(f"Payment is already {payment.status.value}")

        if not await crud.payment.mark_paid_if_pending(db, payment_id=payment_id, paid_at=datetime.now(timezone.utc)):
            await db.rollback()
            raise ConflictError("Payment was confirmed by another request")

        # Serializes confirmations per order; the sum below sees every earlier committed share
        await crud.order.lock(db, payment.order_id)
        order = await self.orders.get_order(db, payment.order_id)
        paid_total = await crud.payment.paid_total(db, order_id=order.id)
        fully_paid = paid_total >= order.total_amount
        if fully_paid:
            await crud.order.set_payment_status(db, order_id=order.id, payment_status=OrderPaymentStatus.PAID)
        await db.commit()

        result = PaymentSchemas.model_validate(await crud.payment.get(db, payment_id))
        logger.info("Payment %s confirmed; order %s paid %s of %s",
                    payment_id, order.order_number, paid_total, order.total_amount)
        await self.notifier.payment_completed(order.id, result)

        if fully_paid and order.status == OrderStatus.SERVED:
            try:
                await self.orders.complete_order(db, order.id)
            except AppError as e:
                # The payment itself is already committed
                logger.warning("Order %s paid but not completed: %s", order.order_number, e.message)
        return result

    async def list_payments(self, db: AsyncSession, order_id: uuid.UUID) -> List[PaymentSchemas]:
        await self.orders.get_order(db, order_id)
        payments = await crud.payment.get_multi_by_order(db, order_id=order_id)
        return [PaymentSchemas.model_validate(p) for p in payments]


def get_payment_service() -> PaymentService:
    return PaymentService(get_order_service())
