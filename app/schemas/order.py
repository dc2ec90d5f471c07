# app/schemas/order.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.db.models.order import OrderItemStatus, OrderPaymentStatus, OrderStatus
from app.schemas.table import TableSummarySchemas


# --- Requests ---
class OrderItemModifierCreateSchemas(BaseModel):
    modifier_option_id: uuid.UUID


class OrderItemCreateSchemas(BaseModel):
    menu_item_id: uuid.UUID
    quantity: int = Field(..., ge=1, le=99)
    special_request: Optional[str] = Field(None, max_length=255)
    modifiers: List[OrderItemModifierCreateSchemas] = []


class OrderCreateSchemas(BaseModel):
    table_id: uuid.UUID
    notes: Optional[str] = Field(None, max_length=1000)
    items: List[OrderItemCreateSchemas] = Field(..., min_length=1)


class OrderAddItemsSchemas(BaseModel):
    notes: Optional[str] = Field(None, max_length=1000)
    items: List[OrderItemCreateSchemas] = Field(..., min_length=1)


class OrderStatusUpdateSchemas(BaseModel):
    status: OrderStatus


# --- Responses ---
class OrderItemModifierSchemas(BaseModel):
    id: uuid.UUID
    modifier_option_id: uuid.UUID
    modifier_group_name: str
    modifier_option_name: str
    price_adjustment: Decimal

    class Config:
        from_attributes = True


class OrderItemSchemas(BaseModel):
    id: uuid.UUID
    order_id: uuid.UUID
    menu_item_id: uuid.UUID
    menu_item_name: str
    unit_price: Decimal
    modifiers_total: Decimal
    quantity: int
    subtotal: Decimal
    special_request: Optional[str] = None
    status: OrderItemStatus
    prepared_at: Optional[datetime] = None
    modifiers: List[OrderItemModifierSchemas] = []

    class Config:
        from_attributes = True


class OrderSchemas(BaseModel):
    id: uuid.UUID
    order_number: str
    table_id: uuid.UUID
    table: Optional[TableSummarySchemas] = None
    status: OrderStatus
    payment_status: OrderPaymentStatus
    subtotal_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    notes: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    items: List[OrderItemSchemas] = []

    class Config:
        from_attributes = True
