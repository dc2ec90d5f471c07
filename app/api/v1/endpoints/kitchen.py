# app/api/v1/endpoints/kitchen.py
import uuid
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.user import User
from app.schemas.order import OrderItemSchemas, OrderSchemas
from app.services.kitchen_service import KitchenService, get_kitchen_service

router = APIRouter()


@router.get("/orders", response_model=List[OrderSchemas])
async def read_kitchen_queue(
    db: AsyncSession = Depends(deps.get_db),
    service: KitchenService = Depends(get_kitchen_service),
    current_user: User = Depends(deps.get_current_kitchen_user),
) -> Any:
    """
    Orders being prepared, oldest first.
    """
    return await service.preparing_orders(db)


@router.post("/orders/{order_id}/ready", response_model=OrderSchemas)
async def mark_order_ready(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: KitchenService = Depends(get_kitchen_service),
    current_user: User = Depends(deps.get_current_kitchen_user),
) -> Any:
    return await service.mark_order_ready(db, order_id)


@router.post("/orders/{order_id}/items/{item_id}/ready", response_model=OrderItemSchemas)
async def mark_item_ready(
    order_id: uuid.UUID,
    item_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: KitchenService = Depends(get_kitchen_service),
    current_user: User = Depends(deps.get_current_kitchen_user),
) -> Any:
    return await service.mark_item_ready(db, order_id, item_id)
