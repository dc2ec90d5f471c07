# app/api/v1/endpoints/orders.py
import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.order import OrderStatus
from app.db.models.user import User
from app.schemas.order import OrderAddItemsSchemas, OrderCreateSchemas, OrderSchemas, OrderStatusUpdateSchemas
from app.services.order_service import OrderService, get_order_service

router = APIRouter()


@router.post("/", response_model=OrderSchemas, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: OrderCreateSchemas,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
) -> Any:
    """
    Place an order for a table (guests ordering through the table QR code).
    The order starts PENDING and is only shown to the kitchen once accepted.
    """
    return await service.create_order(db, order_in)


@router.get("/", response_model=List[OrderSchemas])
async def read_orders(
    db: AsyncSession = Depends(deps.get_db),
    status_filter: Optional[OrderStatus] = None,
    skip: int = 0,
    limit: int = 100,
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_staff),
) -> Any:
    return await service.list_orders(db, status=status_filter, skip=skip, limit=limit)


@router.get("/current", response_model=List[OrderSchemas])
async def read_current_orders(
    table_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
) -> Any:
    """Orders of the table that are neither completed nor cancelled."""
    return await service.current_orders_for_table(db, table_id)


@router.get("/unpaid", response_model=List[OrderSchemas])
async def read_unpaid_orders(
    table_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
) -> Any:
    return await service.unpaid_orders_for_table(db, table_id)


@router.get("/{order_id}", response_model=OrderSchemas)
async def read_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
) -> Any:
    return await service.get_order(db, order_id)


@router.post("/{order_id}/items", response_model=OrderSchemas)
async def add_order_items(
    order_id: uuid.UUID,
    items_in: OrderAddItemsSchemas,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
) -> Any:
    """
    Add items to an order that has not been accepted yet.
    """
    return await service.add_items(db, order_id, items_in)


@router.patch("/{order_id}/status", response_model=OrderSchemas)
async def update_order_status(
    order_id: uuid.UUID,
    status_in: OrderStatusUpdateSchemas,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_staff),
) -> Any:
    return await service.update_status(db, order_id, status_in.status)


@router.post("/{order_id}/accept", response_model=OrderSchemas)
async def accept_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_floor_user),
) -> Any:
    return await service.accept_order(db, order_id)


@router.post("/{order_id}/reject", response_model=OrderSchemas)
async def reject_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_floor_user),
) -> Any:
    return await service.reject_order(db, order_id)


@router.post("/{order_id}/send-to-kitchen", response_model=OrderSchemas)
async def send_order_to_kitchen(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_floor_user),
) -> Any:
    """
    Same as accept: PENDING -> PREPARING, and the kitchen is notified.
    """
    return await service.accept_order(db, order_id)


@router.post("/{order_id}/mark-ready", response_model=OrderSchemas)
async def mark_order_ready(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_staff),
) -> Any:
    return await service.mark_order_ready(db, order_id)


@router.post("/{order_id}/served", response_model=OrderSchemas)
async def mark_order_served(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_floor_user),
) -> Any:
    return await service.mark_served(db, order_id)


@router.post("/{order_id}/complete", response_model=OrderSchemas)
async def complete_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_floor_user),
) -> Any:
    return await service.complete_order(db, order_id)


@router.post("/{order_id}/cancel", response_model=OrderSchemas)
async def cancel_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: OrderService = Depends(get_order_service),
    current_user: User = Depends(deps.get_current_staff),
) -> Any:
    return await service.cancel_order(db, order_id)
