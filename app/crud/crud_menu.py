# app/crud/crud_menu.py
import uuid
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, NotFoundError
from app.db.models.menu import Category, MenuItem, MenuItemStatus, ModifierGroup, ModifierOption
from app.schemas.menu import CategoryCreateSchemas, MenuItemCreateSchemas, ModifierGroupCreateSchemas


def _with_modifiers():
    return selectinload(MenuItem.modifier_groups).selectinload(ModifierGroup.options)


class CRUDMenu:
    async def get_category(self, db: AsyncSession, id: uuid.UUID) -> Optional[Category]:
        return await db.get(Category, id)

    async def get_categories(self, db: AsyncSession) -> List[Category]:
        result = await db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def create_category(self, db: AsyncSession, *, obj_in: CategoryCreateSchemas) -> Category:
        existing = await db.execute(select(Category).where(Category.name == obj_in.name))
        if existing.scalars().first():
            raise ConflictError(f"Category \"{obj_in.name}\" already exists")
        db_obj = Category(name=obj_in.name, description=obj_in.description)
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def get_item(self, db: AsyncSession, id: uuid.UUID) -> Optional[MenuItem]:
        """Menu item with its modifier groups and their options loaded."""
        result = await db.execute(
            select(MenuItem).options(_with_modifiers()).where(MenuItem.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_items(
        self, db: AsyncSession, *, category_id: Optional[uuid.UUID] = None, available_only: bool = False
    ) -> List[MenuItem]:
        query = select(MenuItem).options(_with_modifiers())
        if category_id:
            query = query.where(MenuItem.category_id == category_id)
        if available_only:
            query = query.where(MenuItem.status == MenuItemStatus.AVAILABLE)
        result = await db.execute(query.order_by(MenuItem.name))
        return list(result.scalars().all())

    async def get_groups(self, db: AsyncSession, ids: Sequence[uuid.UUID]) -> List[ModifierGroup]:
        if not ids:
            return []
        result = await db.execute(
            select(ModifierGroup).options(selectinload(ModifierGroup.options)).where(ModifierGroup.id.in_(ids))
        )
        groups = list(result.scalars().all())
        missing = set(ids) - {g.id for g in groups}
        if missing:
            raise NotFoundError(f"Modifier group(s) not found: {', '.join(sorted(str(m) for m in missing))}")
        return groups

    async def create_item(self, db: AsyncSession, *, obj_in: MenuItemCreateSchemas) -> MenuItem:
        if obj_in.category_id and not await self.get_category(db, obj_in.category_id):
            raise NotFoundError("Category not found")

        groups = await self.get_groups(db, obj_in.modifier_group_ids)
        db_obj = MenuItem(
            category_id=obj_in.category_id,
            name=obj_in.name,
            description=obj_in.description,
            price=obj_in.price,
            status=obj_in.status,
            modifier_groups=groups,
        )
        db.add(db_obj)
        await db.flush()
        return await self.get_item(db, db_obj.id)

    async def attach_groups(self, db: AsyncSession, *, item_id: uuid.UUID, group_ids: Sequence[uuid.UUID]) -> MenuItem:
        db_item = await self.get_item(db, item_id)
        if not db_item:
            raise NotFoundError("Menu item not found")
        groups = await self.get_groups(db, group_ids)
        db_item.modifier_groups = groups
        await db.flush()
        return await self.get_item(db, item_id)

    async def create_modifier_group(self, db: AsyncSession, *, obj_in: ModifierGroupCreateSchemas) -> ModifierGroup:
        db_obj = ModifierGroup(
            name=obj_in.name,
            selection_type=obj_in.selection_type,
            is_required=obj_in.is_required,
            min_selections=obj_in.min_selections,
            max_selections=obj_in.max_selections,
            options=[ModifierOption(name=o.name, price_adjustment=o.price_adjustment) for o in obj_in.options],
        )
        db.add(db_obj)
        await db.flush()
        result = await db.execute(
            select(ModifierGroup).options(selectinload(ModifierGroup.options)).where(ModifierGroup.id == db_obj.id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().one()


menu = CRUDMenu()
