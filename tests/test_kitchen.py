import uuid

import pytest

from app.core.exceptions import InvalidTransitionError, NotFoundError
from app.db.models.order import OrderItemStatus, OrderStatus
from app.services.connection_manager import order_room
from tests.conftest import FakeWebSocket, two_item_order


async def accepted_order(db, menu, order_service):
    order = await order_service.create_order(db, two_item_order(menu))
    return await order_service.accept_order(db, order.id)


async def test_queue_lists_preparing_orders_oldest_first(db, menu, order_service, kitchen_service):
    first = await accepted_order(db, menu, order_service)
    await order_service.create_order(db, two_item_order(menu))  # still pending, not shown
    second = await accepted_order(db, menu, order_service)

    queue = await kitchen_service.preparing_orders(db)

    assert [o.id for o in queue] == [first.id, second.id]


async def test_mark_item_ready_stamps_and_broadcasts(db, menu, order_service, kitchen_service, connections):
    order = await accepted_order(db, menu, order_service)
    ws = FakeWebSocket()
    cid = await connections.connect(ws)
    connections.join(cid, "kitchen")
    connections.join(cid, order_room(order.id))
    item = order.items[0]

    result = await kitchen_service.mark_item_ready(db, order.id, item.id)

    assert result.status == OrderItemStatus.READY
    assert result.prepared_at is not None
    assert ws.events() == ["orderItem:statusUpdated"]
    assert ws.sent[0]["data"]["itemId"] == str(item.id)
    assert ws.sent[0]["data"]["status"] == "READY"


async def test_mark_item_ready_twice_keeps_state_and_broadcasts_again(
    db, menu, order_service, kitchen_service, notifier
):
    order = await accepted_order(db, menu, order_service)
    item = order.items[0]

    first = await kitchen_service.mark_item_ready(db, order.id, item.id)
    second = await kitchen_service.mark_item_ready(db, order.id, item.id)

    assert first.status == second.status == OrderItemStatus.READY
    assert second.prepared_at == first.prepared_at
    assert notifier.names()[-2:] == ["orderItem:statusUpdated", "orderItem:statusUpdated"]
    reloaded = await order_service.get_order(db, order.id)
    assert [i.status for i in reloaded.items if i.id == item.id] == [OrderItemStatus.READY]


async def test_item_from_another_order_is_not_found(db, menu, order_service, kitchen_service):
    order = await accepted_order(db, menu, order_service)
    other = await accepted_order(db, menu, order_service)

    with pytest.raises(NotFoundError):
        await kitchen_service.mark_item_ready(db, order.id, other.items[0].id)
    with pytest.raises(NotFoundError):
        await kitchen_service.mark_item_ready(db, order.id, uuid.uuid4())


async def test_items_of_closed_orders_cannot_change(db, menu, order_service, kitchen_service):
    order = await accepted_order(db, menu, order_service)
    await order_service.cancel_order(db, order.id)

    with pytest.raises(InvalidTransitionError):
        await kitchen_service.mark_item_ready(db, order.id, order.items[0].id)


async def test_items_of_unaccepted_orders_stay_hidden_from_kitchen(
    db, menu, order_service, kitchen_service, connections
):
    order = await order_service.create_order(db, two_item_order(menu))
    ws = FakeWebSocket()
    cid = await connections.connect(ws)
    connections.join(cid, "kitchen")

    with pytest.raises(InvalidTransitionError):
        await kitchen_service.mark_item_ready(db, order.id, order.items[0].id)

    assert ws.sent == []
    reloaded = await order_service.get_order(db, order.id)
    assert reloaded.status == OrderStatus.PENDING
    assert {i.status for i in reloaded.items} == {OrderItemStatus.PENDING}


async def test_items_of_served_orders_cannot_be_marked(db, menu, order_service, kitchen_service, notifier):
    order = await accepted_order(db, menu, order_service)
    await order_service.mark_order_ready(db, order.id)
    await order_service.mark_served(db, order.id)
    published = len(notifier.published)

    with pytest.raises(InvalidTransitionError):
        await kitchen_service.mark_item_ready(db, order.id, order.items[0].id)

    assert len(notifier.published) == published


async def test_kitchen_mark_ready_is_a_staff_override(db, menu, order_service, kitchen_service):
    order = await accepted_order(db, menu, order_service)

    ready = await kitchen_service.mark_order_ready(db, order.id)

    assert ready.status == OrderStatus.READY
    assert await kitchen_service.preparing_orders(db) == []
