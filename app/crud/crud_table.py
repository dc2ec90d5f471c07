# app/crud/crud_table.py
import uuid
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.db.models.table import Table, TableStatus
from app.schemas.table import TableCreateSchemas, TableUpdateSchemas


class CRUDTable:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[Table]:
        return await db.get(Table, id)

    async def get_by_number(self, db: AsyncSession, *, table_number: str) -> Optional[Table]:
        result = await db.execute(select(Table).where(Table.table_number == table_number))
        return result.scalars().first()

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100, status: Optional[TableStatus] = None
    ) -> List[Table]:
        query = select(Table)
        if status:
            query = query.where(Table.status == status)
        result = await db.execute(query.order_by(Table.table_number).offset(skip).limit(limit))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: TableCreateSchemas) -> Table:
        if await self.get_by_number(db, table_number=obj_in.table_number):
            raise ConflictError(f"Table number \"{obj_in.table_number}\" already exists")

        db_obj = Table(
            table_number=obj_in.table_number,
            capacity=obj_in.capacity,
            location=obj_in.location,
            status=TableStatus.AVAILABLE,
        )
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: Table, obj_in: Union[TableUpdateSchemas, Dict[str, Any]]
    ) -> Table:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        new_number = update_data.get("table_number")
        if new_number and new_number != db_obj.table_number:
            existing = await self.get_by_number(db, table_number=new_number)
            if existing and existing.id != db_obj.id:
                raise ConflictError(f"Another table already uses number \"{new_number}\"")

        for field in update_data:
            if hasattr(db_obj, field):
                setattr(db_obj, field, update_data[field])

        db.add(db_obj)
        await db.flush()
        return db_obj

    async def set_qr_session(self, db: AsyncSession, *, db_obj: Table, token: str, session_id: str) -> Table:
        db_obj.qr_token = token
        db_obj.current_session_id = session_id
        db.add(db_obj)
        await db.flush()
        return db_obj


table = CRUDTable()
