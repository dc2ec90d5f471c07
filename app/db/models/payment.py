# app/db/models/payment.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Enum as SAEnum
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    CARD = "CARD"
    VNPAY = "VNPAY"
    E_WALLET = "E_WALLET"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class Payment(Base):
    # Payments are append-only; an order may be settled by several of them
    order_id = Column(ForeignKey("orders.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(SAEnum(PaymentMethod, name="payment_method"), nullable=False)
    status = Column(SAEnum(PaymentStatus, name="payment_status"), default=PaymentStatus.PENDING, nullable=False)
    transaction_ref = Column(String, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    order = relationship("Order", back_populates="payments")
