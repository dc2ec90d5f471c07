import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar

import pytest

from app.db.models.order import OrderItemStatus, OrderPaymentStatus, OrderStatus
from app.db.models.payment import PaymentMethod, PaymentStatus
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
from app.services.connection_manager import ConnectionManager, order_room
from app.services.notification_service import NotificationService, plan_deliveries
from tests.conftest import FakeWebSocket


def make_order(status=OrderStatus.PENDING) -> OrderSchemas:
    return OrderSchemas(
        id=uuid.uuid4(),
        order_number="261019-ABC123",
        table_id=uuid.uuid4(),
        status=status,
        payment_status=OrderPaymentStatus.PENDING,
        subtotal_amount=Decimal("10.00"),
        tax_amount=Decimal("0.80"),
        total_amount=Decimal("10.80"),
        created_at=datetime.now(timezone.utc),
    )


def rooms_by_event(deliveries):
    return {d.event.event_name: set(d.rooms) for d in deliveries}


def test_created_goes_to_admin_only():
    order = make_order()
    assert rooms_by_event(plan_deliveries(OrderCreatedEvent(order=order))) == {"order:created": {"admin"}}


def test_preparing_reaches_kitchen_and_repeats_created_for_it():
    order = make_order(OrderStatus.PREPARING)
    deliveries = plan_deliveries(OrderStatusUpdatedEvent(order_id=order.id, status=order.status, order=order))
    assert rooms_by_event(deliveries) == {
        "order:statusUpdated": {order_room(order.id), "admin", "kitchen"},
        "order:created": {"kitchen"},
    }


@pytest.mark.parametrize(
    "status", [OrderStatus.READY, OrderStatus.SERVED, OrderStatus.COMPLETED, OrderStatus.CANCELLED]
)
def test_later_statuses_reach_kitchen(status):
    order = make_order(status)
    deliveries = plan_deliveries(OrderStatusUpdatedEvent(order_id=order.id, status=status, order=order))
    assert rooms_by_event(deliveries) == {"order:statusUpdated": {order_room(order.id), "admin", "kitchen"}}


def test_pending_status_update_stays_out_of_kitchen():
    order = make_order(OrderStatus.PENDING)
    deliveries = plan_deliveries(OrderStatusUpdatedEvent(order_id=order.id, status=order.status, order=order))
    assert rooms_by_event(deliveries) == {"order:statusUpdated": {order_room(order.id), "admin"}}


def test_item_status_goes_to_order_kitchen_and_admin():
    order_id, item_id = uuid.uuid4(), uuid.uuid4()
    event = OrderItemStatusUpdatedEvent(order_id=order_id, item_id=item_id, status=OrderItemStatus.READY)
    assert rooms_by_event(plan_deliveries(event)) == {
        "orderItem:statusUpdated": {order_room(order_id), "kitchen", "admin"}
    }


def test_ready_splits_into_customer_message_and_serve_prompt():
    order = make_order(OrderStatus.READY)
    deliveries = plan_deliveries(OrderReadyEvent(order_id=order.id, order=order))
    assert rooms_by_event(deliveries) == {
        "order:ready": {order_room(order.id)},
        "order:readyToServe": {"waiter"},
    }
    assert isinstance(deliveries[1].event, OrderReadyToServeEvent)


def test_payment_and_waiter_routes():
    order_id = uuid.uuid4()
    payment = PaymentSchemas(
        id=uuid.uuid4(), order_id=order_id, amount=Decimal("5"), method=PaymentMethod.CASH,
        status=PaymentStatus.PAID, created_at=datetime.now(timezone.utc),
    )
    assert rooms_by_event(plan_deliveries(PaymentCompletedEvent(order_id=order_id, payment_data=payment))) == {
        "payment:completed": {order_room(order_id), "admin"}
    }
    assert rooms_by_event(plan_deliveries(WaiterCalledEvent(table_id="t1", table_number="T01"))) == {
        "waiter:called": {"waiter"}
    }


def test_unknown_event_type_has_no_route():
    class StrayEvent(RealtimeEvent):
        event_name: ClassVar[str] = "stray"

    with pytest.raises(TypeError):
        plan_deliveries(StrayEvent())


def test_payloads_use_camel_case_keys():
    order = make_order(OrderStatus.PREPARING)
    message = OrderStatusUpdatedEvent(order_id=order.id, status=order.status, order=order).to_message()
    assert message["event"] == "order:statusUpdated"
    assert set(message["data"]) == {"orderId", "status", "order", "timestamp"}
    assert message["data"]["status"] == "PREPARING"

    ready = OrderReadyEvent(order_id=order.id, order=order).to_message()["data"]
    assert ready["message"] == "Your order is ready!"

    item = OrderItemStatusUpdatedEvent(order_id=order.id, item_id=uuid.uuid4(), status="READY").to_message()
    assert set(item["data"]) == {"orderId", "itemId", "status", "timestamp"}

    waiter = WaiterCalledEvent(table_id="t1", table_number="T01").to_message()["data"]
    assert set(waiter) == {"tableId", "tableNumber", "timestamp"}


def test_created_payload_is_the_full_order():
    order = make_order()
    data = OrderCreatedEvent(order=order).to_message()["data"]
    assert data["id"] == str(order.id)
    assert data["order_number"] == order.order_number


class FailingConnections(ConnectionManager):
    async def emit(self, rooms, message):
        raise RuntimeError("transport down")


class RecordingRelay:
    def __init__(self):
        self.published = []

    def channel_for(self, room):
        return f"restaurant:{room}"

    async def publish_message(self, channel, message):
        self.published.append((channel, message["event"]))
        return True


async def test_broadcast_failure_is_swallowed():
    service = NotificationService(FailingConnections())
    await service.order_created(make_order())


async def test_publish_delivers_to_room_members_and_mirrors_to_relay():
    connections = ConnectionManager()
    kitchen_ws, waiter_ws = FakeWebSocket(), FakeWebSocket()
    kitchen = await connections.connect(kitchen_ws)
    waiter = await connections.connect(waiter_ws)
    connections.join(kitchen, "kitchen")
    connections.join(waiter, "waiter")
    relay = RecordingRelay()
    service = NotificationService(connections, relay)

    await service.order_ready(make_order(OrderStatus.READY))

    assert waiter_ws.events() == ["order:readyToServe"]
    assert kitchen_ws.sent == []
    assert ("restaurant:waiter", "order:readyToServe") in relay.published
    assert any(channel.startswith("restaurant:order:") for channel, _ in relay.published)
