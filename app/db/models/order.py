# app/db/models/order.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Enum as SAEnum
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"
    SERVED = "SERVED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OrderItemStatus(str, enum.Enum):
    PENDING = "PENDING"
    READY = "READY"


class OrderPaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class Order(Base):
    order_number = Column(String, nullable=False, unique=True, index=True)  # YYMMDD-XXXXXX
    table_id = Column(ForeignKey("tables.id"), nullable=False, index=True)
    status = Column(SAEnum(OrderStatus, name="order_status"), default=OrderStatus.PENDING, nullable=False, index=True)
    payment_status = Column(
        SAEnum(OrderPaymentStatus, name="order_payment_status"),
        default=OrderPaymentStatus.PENDING, nullable=False,
    )

    subtotal_amount = Column(Numeric(10, 2), default=0, nullable=False)
    tax_amount = Column(Numeric(10, 2), default=0, nullable=False)
    total_amount = Column(Numeric(10, 2), default=0, nullable=False)
    notes = Column(Text, nullable=True)

    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    table = relationship("Table", back_populates="orders")
    items = relationship(
        "OrderItem", back_populates="order",
        cascade="all, delete-orphan", order_by="OrderItem.created_at",
    )
    payments = relationship("Payment", back_populates="order", order_by="desc(Payment.created_at)")


class OrderItem(Base):
    __tablename__ = "order_items"

    order_id = Column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(ForeignKey("menu_items.id"), nullable=False)

    # Snapshot of the menu at order time
    menu_item_name = Column(String, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    modifiers_total = Column(Numeric(10, 2), default=0, nullable=False)

    quantity = Column(Integer, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    special_request = Column(String(255), nullable=True)
    status = Column(SAEnum(OrderItemStatus, name="order_item_status"), default=OrderItemStatus.PENDING, nullable=False)
    prepared_at = Column(DateTime(timezone=True), nullable=True)

    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")
    modifiers = relationship("OrderItemModifier", back_populates="order_item", cascade="all, delete-orphan")


class OrderItemModifier(Base):
    __tablename__ = "order_item_modifiers"

    order_item_id = Column(ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False, index=True)
    modifier_option_id = Column(ForeignKey("modifier_options.id"), nullable=False)
    modifier_group_name = Column(String, nullable=False)
    modifier_option_name = Column(String, nullable=False)
    price_adjustment = Column(Numeric(10, 2), default=0, nullable=False)

    order_item = relationship("OrderItem", back_populates="modifiers")
