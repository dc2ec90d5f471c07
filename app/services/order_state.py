# app/services/order_state.py
"""
Order and order item state machines.

    PENDING -> PREPARING -> READY -> SERVED -> COMPLETED
       |           |          |
       +-----------+----------+--> CANCELLED

COMPLETED and CANCELLED are terminal. Items only ever go PENDING -> READY.
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple, Type

from app.core.exceptions import InvalidTransitionError
from app.db.models.order import OrderItemStatus, OrderStatus
from app.schemas.realtime import OrderReadyEvent, OrderStatusUpdatedEvent, RealtimeEvent

ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.SERVED, OrderStatus.CANCELLED}),
    OrderStatus.SERVED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

# Orders the kitchen works on; items can only be marked while the order is in one of these
KITCHEN_STATUSES = frozenset({OrderStatus.PREPARING, OrderStatus.READY})

# Timestamp column stamped when an order enters the status
STATUS_TIMESTAMPS: Dict[OrderStatus, str] = {
    OrderStatus.PREPARING: "confirmed_at",
    OrderStatus.COMPLETED: "completed_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


@dataclass(frozen=True)
class Transition:
    previous: OrderStatus
    status: OrderStatus
    notifications: Tuple[Type[RealtimeEvent], ...]

    @property
    def timestamp_field(self):
        return STATUS_TIMESTAMPS.get(self.status)

    @property
    def frees_table(self) -> bool:
        return self.status in TERMINAL_STATUSES


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ORDER_TRANSITIONS[current]


def plan_transition(current: OrderStatus, target: OrderStatus) -> Transition:
    """Resolve (current status, requested status) into a transition or reject it."""
    current = OrderStatus(current)
    target = OrderStatus(target)

    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            current.value, target.value, f"Order is already {current.value} and can no longer change"
        )
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)

    notifications = [OrderStatusUpdatedEvent]
    if target == OrderStatus.READY:
        notifications.append(OrderReadyEvent)
    return Transition(previous=current, status=target, notifications=tuple(notifications))


def can_mark_item_ready(current: OrderItemStatus) -> bool:
    return OrderItemStatus(current) == OrderItemStatus.PENDING


def kitchen_can_handle(order_status: OrderStatus) -> bool:
    """True once the order was accepted and until it leaves the kitchen."""
    return OrderStatus(order_status) in KITCHEN_STATUSES
