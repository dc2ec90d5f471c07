# app/schemas/__init__.py
from .table import TableCreateSchemas, TableUpdateSchemas, TableSchemas, TableSummarySchemas
from .user import UserCreateSchemas, UserSchemas
from .token import TokenSchemas, TokenPayloadSchemas
from .menu import (
    AttachModifierGroupsSchemas, CategoryCreateSchemas, CategorySchemas, MenuItemCreateSchemas,
    MenuItemSchemas, ModifierGroupCreateSchemas, ModifierGroupSchemas, ModifierOptionSchemas,
)
from .order import (
    OrderAddItemsSchemas, OrderCreateSchemas, OrderItemCreateSchemas, OrderItemSchemas,
    OrderSchemas, OrderStatusUpdateSchemas,
)
from .payment import PaymentCreateSchemas, PaymentSchemas
from .qr import QrTokenSchemas, QrVerificationSchemas
