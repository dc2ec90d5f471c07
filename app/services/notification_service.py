# app/services/notification_service.py
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from app.core.config import settings
from app.db.models.order import OrderItemStatus, OrderStatus
from app.schemas.order import OrderSchemas
from app.schemas.payment import PaymentSchemas
from app.schemas.realtime import (
    OrderCreatedEvent,
    OrderItemStatusUpdatedEvent,
    OrderReadyEvent,
    OrderReadyToServeEvent,
    OrderStatusUpdatedEvent,
    PaymentCompletedEvent,
    RealtimeEvent,
    WaiterCalledEvent,
)
from app.services.connection_manager import (
    ADMIN_ROOM,
    KITCHEN_ROOM,
    WAITER_ROOM,
    ConnectionManager,
    manager,
    order_room,
)
from app.services.redis_service import RedisClient, redis_client

logger = logging.getLogger(__name__)

# Statuses the kitchen screen must follow once the order was accepted
KITCHEN_FOLLOWED_STATUSES = frozenset({
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.SERVED,
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
})


@dataclass(frozen=True)
class Delivery:
    rooms: Tuple[str, ...]
    event: RealtimeEvent


def plan_deliveries(event: RealtimeEvent) -> List[Delivery]:
    """Map an event onto the rooms that must receive it.

    Kitchen staff never see an order before it is accepted: ``order:created``
    goes to admin only, and reaches the kitchen when the order turns PREPARING.
    """
    if isinstance(event, OrderCreatedEvent):
        return [Delivery((ADMIN_ROOM,), event)]

    if isinstance(event, OrderStatusUpdatedEvent):
        rooms = [order_room(event.order_id), ADMIN_ROOM]
        if event.status in KITCHEN_FOLLOWED_STATUSES:
            rooms.append(KITCHEN_ROOM)
        deliveries = [Delivery(tuple(rooms), event)]
        if event.status == OrderStatus.PREPARING:
            deliveries.append(Delivery((KITCHEN_ROOM,), OrderCreatedEvent(order=event.order)))
        return deliveries

    if isinstance(event, OrderItemStatusUpdatedEvent):
        return [Delivery((order_room(event.order_id), KITCHEN_ROOM, ADMIN_ROOM), event)]

    if isinstance(event, OrderReadyEvent):
        serve_prompt = OrderReadyToServeEvent(order_id=event.order_id, order=event.order, timestamp=event.timestamp)
        return [
            Delivery((order_room(event.order_id),), event),
            Delivery((WAITER_ROOM,), serve_prompt),
        ]

    if isinstance(event, OrderReadyToServeEvent):
        return [Delivery((WAITER_ROOM,), event)]

    if isinstance(event, PaymentCompletedEvent):
        return [Delivery((order_room(event.order_id), ADMIN_ROOM), event)]

    if isinstance(event, WaiterCalledEvent):
        return [Delivery((WAITER_ROOM,), event)]

    raise TypeError(f"No route for realtime event {type(event).__name__}")


class NotificationService:
    """Fans domain events out to websocket rooms, and to Redis when enabled."""

    def __init__(self, connections: ConnectionManager, relay: Optional[RedisClient] = None):
        self.connections = connections
        self.relay = relay

    async def publish(self, event: RealtimeEvent) -> None:
        # Callers have already committed; nothing raised here may undo that.
        try:
            deliveries = plan_deliveries(event)
        except TypeError:
            logger.exception("Dropping unroutable event %r", event)
            return

        for delivery in deliveries:
            message = delivery.event.to_message()
            logger.info("Emitting %s to %s", message["event"], ", ".join(delivery.rooms))
            try:
                await self.connections.emit(delivery.rooms, message)
            except Exception:
                logger.exception("Broadcast of %s failed", message["event"])
            if self.relay is not None:
                for room in delivery.rooms:
                    await self.relay.publish_message(self.relay.channel_for(room), message)

    # --- One helper per event, called by the services after their write ---

    async def order_created(self, order: OrderSchemas) -> None:
        await self.publish(OrderCreatedEvent(order=order))

    async def order_status_updated(self, order: OrderSchemas) -> None:
        await self.publish(OrderStatusUpdatedEvent(order_id=order.id, status=order.status, order=order))

    async def order_ready(self, order: OrderSchemas) -> None:
        await self.publish(OrderReadyEvent(order_id=order.id, order=order))

    async def order_item_status_updated(
        self, order_id: uuid.UUID, item_id: uuid.UUID, status: OrderItemStatus
    ) -> None:
        await self.publish(OrderItemStatusUpdatedEvent(order_id=order_id, item_id=item_id, status=status))

    async def payment_completed(self, order_id: uuid.UUID, payment: PaymentSchemas) -> None:
        await self.publish(PaymentCompletedEvent(order_id=order_id, payment_data=payment))

    async def waiter_called(self, table_id: str, table_number: str) -> None:
        logger.info("Waiter called for table %s", table_number)
        await self.publish(WaiterCalledEvent(table_id=table_id, table_number=table_number))


notification_service = NotificationService(manager, redis_client if settings.REDIS_ENABLED else None)


def get_notification_service() -> NotificationService:
    return notification_service
