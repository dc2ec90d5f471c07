# app/schemas/realtime.py
"""
Realtime events pushed to connected clients.

Every event name has exactly one model. The wire envelope is
``{"event": <name>, "data": <payload>}`` and payload keys are camelCase.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.db.models.order import OrderItemStatus, OrderStatus
from app.schemas.order import OrderSchemas
from app.schemas.payment import PaymentSchemas


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RealtimeEvent(BaseModel):
    event_name: ClassVar[str]

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_message(self) -> Dict[str, Any]:
        return {"event": self.event_name, "data": self.payload()}


class OrderCreatedEvent(RealtimeEvent):
    event_name: ClassVar[str] = "order:created"

    order: OrderSchemas

    def payload(self) -> Dict[str, Any]:
        # Carries the full order object, not a wrapper
        return self.order.model_dump(mode="json")


class OrderStatusUpdatedEvent(RealtimeEvent):
    event_name: ClassVar[str] = "order:statusUpdated"

    order_id: uuid.UUID
    status: OrderStatus
    order: OrderSchemas
    timestamp: datetime = Field(default_factory=_now)


class OrderReadyEvent(RealtimeEvent):
    event_name: ClassVar[str] = "order:ready"

    order_id: uuid.UUID
    order: OrderSchemas
    message: str = "Your order is ready!"
    timestamp: datetime = Field(default_factory=_now)


class OrderReadyToServeEvent(RealtimeEvent):
    event_name: ClassVar[str] = "order:readyToServe"

    order_id: uuid.UUID
    order: OrderSchemas
    timestamp: datetime = Field(default_factory=_now)


class OrderItemStatusUpdatedEvent(RealtimeEvent):
    event_name: ClassVar[str] = "orderItem:statusUpdated"

    order_id: uuid.UUID
    item_id: uuid.UUID
    status: OrderItemStatus
    timestamp: datetime = Field(default_factory=_now)


class PaymentCompletedEvent(RealtimeEvent):
    event_name: ClassVar[str] = "payment:completed"

    order_id: uuid.UUID
    payment_data: PaymentSchemas
    timestamp: datetime = Field(default_factory=_now)


class WaiterCalledEvent(RealtimeEvent):
    event_name: ClassVar[str] = "waiter:called"

    table_id: str
    table_number: str
    timestamp: datetime = Field(default_factory=_now)


# --- Inbound messages from a connection ---
class ClientMessageSchemas(BaseModel):
    event: str
    data: Any = None


class WaiterCallSchemas(BaseModel):
    table_id: str
    table_number: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class AckSchemas(BaseModel):
    request: str
    success: bool
    message: str
    room: Optional[str] = None

    def to_message(self) -> Dict[str, Any]:
        return {"event": "ack", "data": self.model_dump(exclude_none=True)}
