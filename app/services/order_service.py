# app/services/order_service.py
import logging
import secrets
import string
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.db.models.menu import MenuItem, MenuItemStatus, ModifierOption, ModifierStatus, SelectionType
from app.db.models.order import Order, OrderItem, OrderItemModifier, OrderItemStatus, OrderPaymentStatus, OrderStatus
from app.db.models.table import TableStatus
from app.schemas.order import OrderAddItemsSchemas, OrderCreateSchemas, OrderItemCreateSchemas, OrderSchemas
from app.schemas.realtime import OrderReadyEvent, OrderStatusUpdatedEvent
from app.services.notification_service import NotificationService, get_notification_service
from app.services.order_state import Transition, plan_transition

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


def money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def generate_order_number(now: Optional[datetime] = None) -> str:
    """YYMMDD-XXXXXX"""
    now = now or datetime.now(timezone.utc)
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(6))
    return f"{now.strftime('%y%m%d')}-{suffix}"


def resolve_modifiers(
    menu_item: MenuItem, option_ids: Sequence[uuid.UUID]
) -> Tuple[Decimal, List[OrderItemModifier]]:
    """
    Check the requested modifier options against the item's modifier groups
    and return (price adjustment total, snapshot rows for the order item).

    Rules:
    1. every option belongs to an active group offered with this item
    2. required groups have at least one selection
    3. min/max selections are honored (0 means no limit)
    4. SINGLE groups accept one option
    5. no option is selected twice
    """
    groups = [g for g in menu_item.modifier_groups if g.status == ModifierStatus.ACTIVE]
    valid_options: Dict[uuid.UUID, Tuple[ModifierOption, object]] = {}
    for group in groups:
        for option in group.options:
            if option.status == ModifierStatus.ACTIVE:
                valid_options[option.id] = (option, group)

    selections: Dict[uuid.UUID, List[ModifierOption]] = {}
    for option_id in option_ids:
        if option_id not in valid_options:
            raise ValidationError(f"Modifier option \"{option_id}\" is not valid for \"{menu_item.name}\"")
        option, group = valid_options[option_id]
        selections.setdefault(group.id, []).append(option)

    for group in groups:
        chosen = selections.get(group.id, [])
        count = len(chosen)

        if group.is_required and count == 0:
            raise ValidationError(
                f"\"{group.name}\" is required for \"{menu_item.name}\". "
                f"Please select at least {group.min_selections or 1} option(s)."
            )
        if (count > 0 or group.is_required) and group.min_selections > 0 and count < group.min_selections:
            raise ValidationError(
                f"\"{group.name}\" requires at least {group.min_selections} selection(s), but only {count} provided."
            )
        if group.max_selections > 0 and count > group.max_selections:
            raise ValidationError(
                f"\"{group.name}\" allows maximum {group.max_selections} selection(s), but {count} provided."
            )
        if group.selection_type == SelectionType.SINGLE and count > 1:
            raise ValidationError(
                f"\"{group.name}\" only allows single selection, but {count} options were selected."
            )
        if len({option.id for option in chosen}) != count:
            raise ValidationError(f"Duplicate modifier options detected in \"{group.name}\".")

    total = Decimal("0")
    snapshot: List[OrderItemModifier] = []
    for group in groups:
        for option in selections.get(group.id, []):
            total += Decimal(option.price_adjustment)
            snapshot.append(OrderItemModifier(
                modifier_option_id=option.id,
                modifier_group_name=group.name,
                modifier_option_name=option.name,
                price_adjustment=option.price_adjustment,
            ))
    return total, snapshot


class OrderService:
    """Creates orders and moves them through their lifecycle.

    Every write is committed before the matching realtime event is emitted.
    """

    def __init__(self, notifier: NotificationService):
        self.notifier = notifier

    # --- Queries ---

    async def get_order(self, db: AsyncSession, order_id: uuid.UUID) -> Order:
        order = await crud.order.get(db, order_id)
        if not order:
            raise NotFoundError(f"Order #{order_id} not found")
        return order

    async def list_orders(self, db: AsyncSession, *, status: Optional[OrderStatus] = None,
                          skip: int = 0, limit: int = 100) -> List[Order]:
        return await crud.order.get_multi(db, status=status, skip=skip, limit=limit)

    async def current_orders_for_table(self, db: AsyncSession, table_id: uuid.UUID) -> List[Order]:
        await self._get_table(db, table_id)
        return await crud.order.get_active_by_table(db, table_id=table_id)

    async def unpaid_orders_for_table(self, db: AsyncSession, table_id: uuid.UUID) -> List[Order]:
        await self._get_table(db, table_id)
        return await crud.order.get_unpaid_by_table(db, table_id=table_id)

    # --- Creation ---

    async def create_order(self, db: AsyncSession, order_in: OrderCreateSchemas) -> OrderSchemas:
        table = await self._get_table(db, order_in.table_id)
        if table.status == TableStatus.INACTIVE:
            raise ValidationError("Table is not active")

        items, subtotal = await self._build_items(db, order_in.items)
        tax = money(subtotal * settings.TAX_RATE)

        db_order = Order(
            order_number=await self._unique_order_number(db),
            table_id=table.id,
            status=OrderStatus.PENDING,
            payment_status=OrderPaymentStatus.PENDING,
            subtotal_amount=subtotal,
            tax_amount=tax,
            total_amount=subtotal + tax,
            notes=order_in.notes,
            items=items,
        )
        await crud.order.create(db, db_obj=db_order)
        table.status = TableStatus.OCCUPIED
        await db.commit()

        order = OrderSchemas.model_validate(await crud.order.get(db, db_order.id))
        logger.info("Order %s created for table %s (%d items)", order.order_number, table.table_number, len(items))
        await self.notifier.order_created(order)
        return order

    async def add_items(self, db: AsyncSession, order_id: uuid.UUID, items_in: OrderAddItemsSchemas) -> OrderSchemas:
        db_order = await self.get_order(db, order_id)
        if db_order.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot add items to order - order is already {db_order.status.value}. "
                "Only PENDING orders can be modified."
            )

        items, added = await self._build_items(db, items_in.items)
        for item in items:
            item.order_id = db_order.id
            db.add(item)

        subtotal = money(Decimal(db_order.subtotal_amount) + added)
        tax = money(subtotal * settings.TAX_RATE)
        notes = db_order.notes
        if items_in.notes:
            notes = f"{notes}\n[Added items] {items_in.notes}" if notes else f"[Added items] {items_in.notes}"

        updated = await crud.order.update_totals(
            db, order_id=db_order.id, subtotal=subtotal, tax=tax, total=subtotal + tax,
            notes=notes, expected=OrderStatus.PENDING,
        )
        if not updated:
            await db.rollback()
            raise ConflictError(f"Order {db_order.order_number} changed while adding items; reload and retry")
        await db.commit()

        order = OrderSchemas.model_validate(await crud.order.get(db, order_id))
        logger.info("Added %d item(s) to order %s", len(items), order.order_number)
        await self.notifier.order_status_updated(order)
        return order

    # --- Lifecycle ---

    async def update_status(self, db: AsyncSession, order_id: uuid.UUID, status: OrderStatus) -> OrderSchemas:
        db_order = await self.get_order(db, order_id)
        transition = plan_transition(db_order.status, status)

        values = {"status": transition.status}
        if transition.timestamp_field:
            values[transition.timestamp_field] = datetime.now(timezone.utc)

        # Guarded write: only applies if nobody moved the order since we read it
        updated = await crud.order.update_status_if(
            db, order_id=db_order.id, expected=transition.previous, values=values
        )
        if not updated:
            await db.rollback()
            raise ConflictError(
                f"Order {db_order.order_number} was updated by another request; reload and retry"
            )

        if transition.frees_table:
            await self._release_table(db, db_order)
        await db.commit()

        order = OrderSchemas.model_validate(await crud.order.get(db, order_id))
        logger.info("Order %s: %s -> %s", order.order_number, transition.previous.value, order.status.value)
        await self._notify(transition, order)
        return order

    async def accept_order(self, db: AsyncSession, order_id: uuid.UUID) -> OrderSchemas:
        # First moment the kitchen sees the order
        return await self.update_status(db, order_id, OrderStatus.PREPARING)

    async def reject_order(self, db: AsyncSession, order_id: uuid.UUID) -> OrderSchemas:
        return await self.update_status(db, order_id, OrderStatus.CANCELLED)

    async def cancel_order(self, db: AsyncSession, order_id: uuid.UUID) -> OrderSchemas:
        return await self.update_status(db, order_id, OrderStatus.CANCELLED)

    async def mark_order_ready(self, db: AsyncSession, order_id: uuid.UUID) -> OrderSchemas:
        # Staff override: item completeness is not checked
        return await self.update_status(db, order_id, OrderStatus.READY)

    async def mark_served(self, db: AsyncSession, order_id: uuid.UUID) -> OrderSchemas:
        return await self.update_status(db, order_id, OrderStatus.SERVED)

    async def complete_order(self, db: AsyncSession, order_id: uuid.UUID) -> OrderSchemas:
        return await self.update_status(db, order_id, OrderStatus.COMPLETED)

    # --- Helpers ---

    async def _notify(self, transition: Transition, order: OrderSchemas) -> None:
        handlers = {
            OrderStatusUpdatedEvent: self.notifier.order_status_updated,
            OrderReadyEvent: self.notifier.order_ready,
        }
        for event_type in transition.notifications:
            await handlers[event_type](order)

    async def _get_table(self, db: AsyncSession, table_id: uuid.UUID):
        table = await crud.table.get(db, table_id)
        if not table:
            raise NotFoundError("Table not found")
        return table

    async def _release_table(self, db: AsyncSession, db_order: Order) -> None:
        others = await crud.order.count_other_active(db, table_id=db_order.table_id, exclude_id=db_order.id)
        if others:
            return
        table = await crud.table.get(db, db_order.table_id)
        if table and table.status == TableStatus.OCCUPIED:
            table.status = TableStatus.AVAILABLE
            db.add(table)

    async def _unique_order_number(self, db: AsyncSession) -> str:
        for _ in range(5):
            number = generate_order_number()
            if not await crud.order.order_number_exists(db, number):
                return number
        raise ConflictError("Could not allocate an order number, please retry")

    async def _build_items(
        self, db: AsyncSession, items_in: Sequence[OrderItemCreateSchemas]
    ) -> Tuple[List[OrderItem], Decimal]:
        if not items_in:
            raise ValidationError("Order must contain at least one item")

        items: List[OrderItem] = []
        subtotal = Decimal("0")
        for item_in in items_in:
            menu_item = await crud.menu.get_item(db, item_in.menu_item_id)
            if not menu_item:
                raise NotFoundError(f"Menu item \"{item_in.menu_item_id}\" not found")
            if menu_item.status != MenuItemStatus.AVAILABLE:
                raise ValidationError(f"Menu item \"{menu_item.name}\" is not available")

            modifiers_total, modifiers = resolve_modifiers(
                menu_item, [m.modifier_option_id for m in item_in.modifiers]
            )
            unit_price = money(menu_item.price)
            item_subtotal = money((unit_price + modifiers_total) * item_in.quantity)
            subtotal += item_subtotal

            items.append(OrderItem(
                menu_item_id=menu_item.id,
                menu_item_name=menu_item.name,
                unit_price=unit_price,
                modifiers_total=money(modifiers_total),
                quantity=item_in.quantity,
                subtotal=item_subtotal,
                special_request=item_in.special_request,
                status=OrderItemStatus.PENDING,
                modifiers=modifiers,
            ))
        return items, money(subtotal)


def get_order_service() -> OrderService:
    return OrderService(get_notification_service())
