# app/crud/crud_payment.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.payment import Payment, PaymentStatus
from app.schemas.payment import PaymentCreateSchemas


class CRUDPayment:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[Payment]:
        result = await db.execute(
            select(Payment).where(Payment.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_multi_by_order(self, db: AsyncSession, *, order_id: uuid.UUID) -> List[Payment]:
        result = await db.execute(
            select(Payment).where(Payment.order_id == order_id).order_by(Payment.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: PaymentCreateSchemas) -> Payment:
        db_obj = Payment(
            order_id=obj_in.order_id,
            amount=obj_in.amount,
            method=obj_in.method,
            status=PaymentStatus.PENDING,
            transaction_ref=obj_in.transaction_ref,
        )
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def mark_paid_if_pending(self, db: AsyncSession, *, payment_id: uuid.UUID, paid_at: datetime) -> bool:
        result = await db.execute(
            update(Payment)
            .where(Payment.id == payment_id, Payment.status == PaymentStatus.PENDING)
            .values(status=PaymentStatus.PAID, paid_at=paid_at)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1

    async def paid_total(self, db: AsyncSession, *, order_id: uuid.UUID) -> Decimal:
        result = await db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.order_id == order_id, Payment.status == PaymentStatus.PAID)
        )
        return Decimal(str(result.scalar() or 0))


payment = CRUDPayment()
