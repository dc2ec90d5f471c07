# app/crud/crud_order.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.order import Order, OrderItem, OrderItemStatus, OrderPaymentStatus, OrderStatus

ACTIVE_STATUSES = (OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.SERVED)


def _order_options():
    return (
        selectinload(Order.table),
        selectinload(Order.items).selectinload(OrderItem.modifiers),
    )


class CRUDOrder:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[Order]:
        """Order with table, items and item modifiers freshly loaded."""
        result = await db.execute(
            select(Order).options(*_order_options()).where(Order.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_item(self, db: AsyncSession, *, order_id: uuid.UUID, item_id: uuid.UUID) -> Optional[OrderItem]:
        result = await db.execute(
            select(OrderItem).options(selectinload(OrderItem.modifiers))
            .where(OrderItem.id == item_id, OrderItem.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_multi(
        self, db: AsyncSession, *, status: Optional[OrderStatus] = None, skip: int = 0, limit: int = 100
    ) -> List[Order]:
        query = select(Order).options(*_order_options())
        if status:
            query = query.where(Order.status == status)
        result = await db.execute(query.order_by(Order.created_at.desc()).offset(skip).limit(limit))
        return list(result.scalars().all())

    async def get_active_by_table(self, db: AsyncSession, *, table_id: uuid.UUID) -> List[Order]:
        result = await db.execute(
            select(Order).options(*_order_options())
            .where(Order.table_id == table_id, Order.status.in_(ACTIVE_STATUSES))
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_unpaid_by_table(self, db: AsyncSession, *, table_id: uuid.UUID) -> List[Order]:
        result = await db.execute(
            select(Order).options(*_order_options())
            .where(
                Order.table_id == table_id,
                Order.payment_status == OrderPaymentStatus.PENDING,
                Order.status != OrderStatus.CANCELLED,
            )
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_preparing(self, db: AsyncSession) -> List[Order]:
        # FIFO: oldest orders first on the kitchen screen
        result = await db.execute(
            select(Order).options(*_order_options())
            .where(Order.status == OrderStatus.PREPARING)
            .order_by(Order.created_at.asc())
        )
        return list(result.scalars().all())

    async def count_other_active(self, db: AsyncSession, *, table_id: uuid.UUID, exclude_id: uuid.UUID) -> int:
        result = await db.execute(
            select(func.count(Order.id))
            .where(Order.table_id == table_id, Order.id != exclude_id, Order.status.in_(ACTIVE_STATUSES))
        )
        return int(result.scalar() or 0)

    async def order_number_exists(self, db: AsyncSession, order_number: str) -> bool:
        result = await db.execute(select(Order.id).where(Order.order_number == order_number))
        return result.first() is not None

    async def create(self, db: AsyncSession, *, db_obj: Order) -> Order:
        db.add(db_obj)
        await db.flush()  # Assigns ids to order, items and modifiers
        return db_obj

    async def update_status_if(
        self,
        db: AsyncSession,
        *,
        order_id: uuid.UUID,
        expected: OrderStatus,
        values: Dict[str, Any],
    ) -> bool:
        """Write ``values`` only if the order still has status ``expected``.

        Returns False when another writer changed the status first.
        """
        result = await db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1

    async def update_totals(
        self, db: AsyncSession, *, order_id: uuid.UUID, subtotal: Decimal, tax: Decimal, total: Decimal,
        notes: Optional[str], expected: OrderStatus,
    ) -> bool:
        return await self.update_status_if(
            db, order_id=order_id, expected=expected,
            values={"subtotal_amount": subtotal, "tax_amount": tax, "total_amount": total, "notes": notes},
        )

    async def mark_item_ready_if_pending(
        self, db: AsyncSession, *, order_id: uuid.UUID, item_id: uuid.UUID, prepared_at: datetime
    ) -> bool:
        """PENDING -> READY for one item. False if the item was already READY."""
        result = await db.execute(
            update(OrderItem)
            .where(
                OrderItem.id == item_id,
                OrderItem.order_id == order_id,
                OrderItem.status == OrderItemStatus.PENDING,
            )
            .values(status=OrderItemStatus.READY, prepared_at=prepared_at)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1

    def lock_query(self, order_id: uuid.UUID):
        return select(Order.id).where(Order.id == order_id).with_for_update()

    async def lock(self, db: AsyncSession, order_id: uuid.UUID) -> None:
        """Row lock on the order until the transaction ends. A no-op on SQLite."""
        await db.execute(self.lock_query(order_id))

    async def set_payment_status(
        self, db: AsyncSession, *, order_id: uuid.UUID, payment_status: OrderPaymentStatus
    ) -> None:
        await db.execute(
            update(Order).where(Order.id == order_id).values(payment_status=payment_status)
            .execution_options(synchronize_session=False)
        )


order = CRUDOrder()
