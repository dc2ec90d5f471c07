# app/schemas/payment.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.db.models.payment import PaymentMethod, PaymentStatus


class PaymentCreateSchemas(BaseModel):
    order_id: uuid.UUID
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    transaction_ref: Optional[str] = None


# Payments are never updated through the API; a new one is created instead.
class PaymentSchemas(BaseModel):
    id: uuid.UUID
    order_id: uuid.UUID
    amount: Decimal
    method: PaymentMethod
    status: PaymentStatus
    transaction_ref: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
