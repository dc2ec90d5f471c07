from decimal import Decimal

import pytest

from app import crud
from app.core.exceptions import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from app.database import AsyncSessionLocal
from app.db.models.order import OrderItemStatus, OrderStatus
from app.db.models.table import TableStatus
from app.schemas.order import OrderAddItemsSchemas, OrderCreateSchemas
from app.services.connection_manager import order_room
from tests.conftest import FakeWebSocket, two_item_order


async def join(connections, *rooms):
    ws = FakeWebSocket()
    cid = await connections.connect(ws)
    for room in rooms:
        connections.join(cid, room)
    return ws


async def test_create_order_prices_items_with_modifiers_and_tax(db, menu, order_service):
    order = await order_service.create_order(db, two_item_order(menu, notes="Window seat"))

    assert order.status == OrderStatus.PENDING
    assert len(order.items) == 2
    pho = next(i for i in order.items if i.menu_item_name == "Pho")
    assert pho.unit_price == Decimal("10.00")
    assert pho.modifiers_total == Decimal("3.50")
    assert pho.subtotal == Decimal("13.50")
    assert pho.special_request == "No onions"
    assert {m.modifier_option_name for m in pho.modifiers} == {"Large", "Egg"}
    assert order.subtotal_amount == Decimal("17.50")
    assert order.tax_amount == Decimal("1.40")
    assert order.total_amount == Decimal("18.90")
    assert order.order_number[6] == "-"

    table = await crud.table.get(db, menu.table.id)
    await db.refresh(table)
    assert table.status == TableStatus.OCCUPIED


async def test_new_order_is_announced_to_admin_only(db, menu, order_service, notifier, connections):
    kitchen = await join(connections, "kitchen")
    admin = await join(connections, "admin")
    waiter = await join(connections, "waiter")

    await order_service.create_order(db, two_item_order(menu))

    assert notifier.names() == ["order:created"]
    assert admin.events() == ["order:created"]
    assert kitchen.sent == []
    assert waiter.sent == []


async def test_accept_makes_order_visible_to_kitchen(db, menu, order_service, connections):
    kitchen = await join(connections, "kitchen")
    admin = await join(connections, "admin")
    order = await order_service.create_order(db, two_item_order(menu))
    tracker = await join(connections, order_room(order.id))

    accepted = await order_service.accept_order(db, order.id)

    assert accepted.status == OrderStatus.PREPARING
    assert accepted.confirmed_at is not None
    assert kitchen.events() == ["order:statusUpdated", "order:created"]
    assert admin.events() == ["order:created", "order:statusUpdated"]
    assert tracker.events() == ["order:statusUpdated"]


async def test_accept_twice_is_rejected(db, menu, order_service):
    order = await order_service.create_order(db, two_item_order(menu))
    await order_service.accept_order(db, order.id)
    with pytest.raises(InvalidTransitionError):
        await order_service.accept_order(db, order.id)


async def test_broadcast_status_matches_persisted_status(db, menu, order_service, notifier):
    order = await order_service.create_order(db, two_item_order(menu))
    for step in (
        order_service.accept_order, order_service.mark_order_ready,
        order_service.mark_served, order_service.complete_order,
    ):
        result = await step(db, order.id)
        event = notifier.published[-1] if result.status != OrderStatus.READY else notifier.published[-2]
        # A fresh session sees exactly what was broadcast
        async with AsyncSessionLocal() as other:
            stored = await crud.order.get(other, order.id)
        assert event.status == stored.status == result.status


async def test_write_is_committed_before_notification(db, menu, connections):
    from app.services.order_service import OrderService
    from tests.conftest import RecordingNotifier

    seen = []

    class CheckingNotifier(RecordingNotifier):
        async def publish(self, event):
            async with AsyncSessionLocal() as other:
                stored = await crud.order.get(other, event.order_id)
            seen.append((event.status, stored.status))
            await super().publish(event)

    service = OrderService(CheckingNotifier(connections))
    order = await OrderService(RecordingNotifier(connections)).create_order(db, two_item_order(menu))
    await service.accept_order(db, order.id)
    await service.cancel_order(db, order.id)

    assert seen == [
        (OrderStatus.PREPARING, OrderStatus.PREPARING),
        (OrderStatus.CANCELLED, OrderStatus.CANCELLED),
    ]


async def test_mark_ready_without_finished_items_notifies_customer_and_waiter(
    db, menu, order_service, connections
):
    waiter = await join(connections, "waiter")
    order = await order_service.create_order(db, two_item_order(menu))
    tracker = await join(connections, order_room(order.id))
    await order_service.accept_order(db, order.id)

    ready = await order_service.mark_order_ready(db, order.id)

    assert ready.status == OrderStatus.READY
    assert all(item.status == OrderItemStatus.PENDING for item in ready.items)
    assert tracker.events() == ["order:statusUpdated", "order:statusUpdated", "order:ready"]
    assert waiter.events() == ["order:readyToServe"]
    assert tracker.sent[-1]["data"]["message"] == "Your order is ready!"


async def test_mark_ready_missing_order_is_not_found(db, menu, order_service):
    import uuid

    with pytest.raises(NotFoundError):
        await order_service.mark_order_ready(db, uuid.uuid4())


async def test_completed_order_can_no_longer_change(db, menu, order_service):
    order = await order_service.create_order(db, two_item_order(menu))
    for step in (order_service.accept_order, order_service.mark_order_ready, order_service.mark_served,
                 order_service.complete_order):
        await step(db, order.id)

    for target in OrderStatus:
        with pytest.raises(InvalidTransitionError):
            await order_service.update_status(db, order.id, target)
    stored = await order_service.get_order(db, order.id)
    assert stored.status == OrderStatus.COMPLETED
    assert stored.completed_at is not None


async def test_cancel_frees_table_only_when_last_active_order(db, menu, order_service):
    first = await order_service.create_order(db, two_item_order(menu))
    second = await order_service.create_order(db, two_item_order(menu))

    await order_service.cancel_order(db, first.id)
    table = await crud.table.get(db, menu.table.id)
    await db.refresh(table)
    assert table.status == TableStatus.OCCUPIED

    await order_service.reject_order(db, second.id)
    await db.refresh(table)
    assert table.status == TableStatus.AVAILABLE


async def test_lost_race_raises_conflict_and_emits_nothing(db, menu, order_service, notifier, monkeypatch):
    order = await order_service.create_order(db, two_item_order(menu))
    notifier.published.clear()

    async def someone_else_won(*args, **kwargs):
        return False

    monkeypatch.setattr(crud.order, "update_status_if", someone_else_won)
    with pytest.raises(ConflictError):
        await order_service.cancel_order(db, order.id)
    assert notifier.published == []


async def test_guarded_write_only_applies_from_expected_status(db, menu, order_service):
    order = await order_service.create_order(db, two_item_order(menu))
    await order_service.accept_order(db, order.id)

    applied = await crud.order.update_status_if(
        db, order_id=order.id, expected=OrderStatus.PENDING, values={"status": OrderStatus.CANCELLED}
    )
    assert applied is False
    await db.rollback()
    assert (await order_service.get_order(db, order.id)).status == OrderStatus.PREPARING


async def test_create_rejects_unavailable_item_and_inactive_table(db, menu, order_service):
    with pytest.raises(ValidationError, match="not available"):
        await order_service.create_order(db, OrderCreateSchemas(
            table_id=menu.table.id, items=[{"menu_item_id": menu.sold_out.id, "quantity": 1}],
        ))

    table = await crud.table.get(db, menu.table.id)
    await crud.table.update(db, db_obj=table, obj_in={"status": TableStatus.INACTIVE})
    await db.commit()
    with pytest.raises(ValidationError, match="not active"):
        await order_service.create_order(db, two_item_order(menu))


async def test_create_rejects_invalid_modifiers(db, menu, order_service):
    with pytest.raises(ValidationError, match="required"):
        await order_service.create_order(db, OrderCreateSchemas(
            table_id=menu.table.id, items=[{"menu_item_id": menu.pho.id, "quantity": 1}],
        ))


async def test_add_items_only_while_pending(db, menu, order_service, notifier):
    order = await order_service.create_order(db, two_item_order(menu, notes="Window seat"))
    extra = OrderAddItemsSchemas(notes="Extra tea", items=[{"menu_item_id": menu.tea.id, "quantity": 1}])

    updated = await order_service.add_items(db, order.id, extra)

    assert len(updated.items) == 3
    assert updated.subtotal_amount == Decimal("19.50")
    assert updated.total_amount == Decimal("21.06")
    assert updated.notes == "Window seat\n[Added items] Extra tea"
    assert notifier.published[-1].status == OrderStatus.PENDING

    await order_service.accept_order(db, order.id)
    with pytest.raises(ValidationError, match="Only PENDING orders"):
        await order_service.add_items(db, order.id, extra)


async def test_table_queries(db, menu, order_service):
    first = await order_service.create_order(db, two_item_order(menu))
    second = await order_service.create_order(db, two_item_order(menu))
    await order_service.cancel_order(db, second.id)

    current = await order_service.current_orders_for_table(db, menu.table.id)
    unpaid = await order_service.unpaid_orders_for_table(db, menu.table.id)
    assert [o.id for o in current] == [first.id]
    assert [o.id for o in unpaid] == [first.id]

    listed = await order_service.list_orders(db, status=OrderStatus.CANCELLED)
    assert [o.id for o in listed] == [second.id]
