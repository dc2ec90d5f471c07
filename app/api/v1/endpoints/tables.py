# app/api/v1/endpoints/tables.py
import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.api import deps
from app.db.models.table import TableStatus
from app.db.models.user import User
from app.services.notification_service import NotificationService, get_notification_service
from app.services.qr_service import QrService, get_qr_service

router = APIRouter()


@router.post("/", response_model=schemas.TableSchemas, status_code=status.HTTP_201_CREATED)
async def create_table(
    *,
    db: AsyncSession = Depends(deps.get_db),
    table_in: schemas.TableCreateSchemas,
    qr: QrService = Depends(get_qr_service),
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    """
    Create a table.
    A QR token is issued for it right away.
    """
    table = await crud.table.create(db, obj_in=table_in)
    await qr.issue(db, table)
    return table


@router.get("/", response_model=List[schemas.TableSchemas])
async def read_tables(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[TableStatus] = None,
    current_user: User = Depends(deps.get_current_staff)
) -> Any:
    return await crud.table.get_multi(db, skip=skip, limit=limit, status=status_filter)


@router.get("/{table_id}", response_model=schemas.TableSchemas)
async def read_table_by_id(
    table_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_staff)
) -> Any:
    table = await crud.table.get(db, table_id)
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    return table


@router.put("/{table_id}", response_model=schemas.TableSchemas)
async def update_table(
    *,
    db: AsyncSession = Depends(deps.get_db),
    table_id: uuid.UUID,
    table_in: schemas.TableUpdateSchemas,
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    table = await crud.table.get(db, table_id)
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    table = await crud.table.update(db, db_obj=table, obj_in=table_in)
    await db.commit()
    return table


@router.post("/{table_id}/call-waiter", status_code=status.HTTP_202_ACCEPTED)
async def call_waiter(
    table_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    notifier: NotificationService = Depends(get_notification_service),
) -> Any:
    """
    Guest-facing: ask a waiter to come to the table.
    """
    table = await crud.table.get(db, table_id)
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Table not found")
    await notifier.waiter_called(str(table.id), table.table_number)
    return {"message": "Waiter has been notified"}
