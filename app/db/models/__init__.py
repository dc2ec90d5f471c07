# Import every model so Base.metadata knows all tables (create_all, Alembic autogenerate)
from app.db.models.table import Table, TableStatus
from app.db.models.user import User, UserRole
from app.db.models.menu import (
    Category, CategoryStatus, MenuItem, MenuItemStatus, ModifierGroup, ModifierOption,
    ModifierStatus, SelectionType, menu_item_modifier_groups,
)
from app.db.models.order import Order, OrderItem, OrderItemModifier, OrderItemStatus, OrderPaymentStatus, OrderStatus
from app.db.models.payment import Payment, PaymentMethod, PaymentStatus
