# app/api/v1/endpoints/menu.py
import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.api import deps
from app.db.models.user import User
from app.schemas.menu import (
    AttachModifierGroupsSchemas,
    CategoryCreateSchemas,
    CategorySchemas,
    MenuItemCreateSchemas,
    MenuItemSchemas,
    ModifierGroupCreateSchemas,
    ModifierGroupSchemas,
)

router = APIRouter()


@router.get("/items", response_model=List[MenuItemSchemas])
async def read_menu_items(
    db: AsyncSession = Depends(deps.get_db),
    category_id: Optional[uuid.UUID] = None,
) -> Any:
    """
    Public menu: available items with their modifier groups.
    """
    return await crud.menu.get_items(db, category_id=category_id, available_only=True)


@router.get("/categories", response_model=List[CategorySchemas])
async def read_categories(db: AsyncSession = Depends(deps.get_db)) -> Any:
    return await crud.menu.get_categories(db)


@router.post("/categories", response_model=CategorySchemas, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    category_in: CategoryCreateSchemas,
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    category = await crud.menu.create_category(db, obj_in=category_in)
    await db.commit()
    return category


@router.post("/items", response_model=MenuItemSchemas, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    *,
    db: AsyncSession = Depends(deps.get_db),
    item_in: MenuItemCreateSchemas,
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    item = await crud.menu.create_item(db, obj_in=item_in)
    await db.commit()
    return item


@router.post("/modifier-groups", response_model=ModifierGroupSchemas, status_code=status.HTTP_201_CREATED)
async def create_modifier_group(
    *,
    db: AsyncSession = Depends(deps.get_db),
    group_in: ModifierGroupCreateSchemas,
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    group = await crud.menu.create_modifier_group(db, obj_in=group_in)
    await db.commit()
    return group


@router.put("/items/{item_id}/modifier-groups", response_model=MenuItemSchemas)
async def attach_modifier_groups(
    *,
    db: AsyncSession = Depends(deps.get_db),
    item_id: uuid.UUID,
    groups_in: AttachModifierGroupsSchemas,
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    """
    Replace the modifier groups offered with a menu item.
    """
    item = await crud.menu.attach_groups(db, item_id=item_id, group_ids=groups_in.modifier_group_ids)
    await db.commit()
    return item
