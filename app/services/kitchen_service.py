# app/services/kitchen_service.py
import logging
import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.exceptions import InvalidTransitionError, NotFoundError
from app.db.models.order import OrderItemStatus
from app.schemas.order import OrderItemSchemas, OrderSchemas
from app.services.order_service import OrderService, get_order_service
from app.services.order_state import TERMINAL_STATUSES, can_mark_item_ready, kitchen_can_handle

logger = logging.getLogger(__name__)


class KitchenService:
    def __init__(self, orders: OrderService):
        self.orders = orders
        self.notifier = orders.notifier

    async def preparing_orders(self, db: AsyncSession) -> List[OrderSchemas]:
        orders = await crud.order.get_preparing(db)
        return [OrderSchemas.model_validate(o) for o in orders]

    async def mark_order_ready(self, db: AsyncSession, order_id: uuid.UUID) -> OrderSchemas:
        return await self.orders.mark_order_ready(db, order_id)

    async def mark_item_ready(self, db: AsyncSession, order_id: uuid.UUID, item_id: uuid.UUID) -> OrderItemSchemas:
        order = await self.orders.get_order(db, order_id)
        item = await crud.order.get_item(db, order_id=order_id, item_id=item_id)
        if not item:
            raise NotFoundError(f"Item {item_id} not found in order {order_id}")
        if order.status in TERMINAL_STATUSES:
            raise InvalidTransitionError(
                item.status.value, OrderItemStatus.READY.value,
                f"Order is already {order.status.value}; its items can no longer change",
            )
        if not kitchen_can_handle(order.status):
            # Not accepted yet, or already served
            raise InvalidTransitionError(
                item.status.value, OrderItemStatus.READY.value,
                f"Order is {order.status.value}; items can only be marked ready while it is in the kitchen",
            )

        if can_mark_item_ready(item.status):
            # A False result only means a concurrent call marked it first
            await crud.order.mark_item_ready_if_pending(
                db, order_id=order_id, item_id=item_id, prepared_at=datetime.now(timezone.utc)
            )
            await db.commit()
            item = await crud.order.get_item(db, order_id=order_id, item_id=item_id)
            logger.info("Item %s of order %s is ready", item.menu_item_name, order.order_number)

        result = OrderItemSchemas.model_validate(item)
        await self.notifier.order_item_status_updated(order_id, result.id, result.status)
        return result


def get_kitchen_service() -> KitchenService:
    return KitchenService(get_order_service())
