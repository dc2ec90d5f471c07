# app/api/v1/endpoints/users.py
from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, schemas
from app.api import deps
from app.db.models.user import User

router = APIRouter()


@router.post("/", response_model=schemas.UserSchemas, status_code=status.HTTP_201_CREATED)
async def create_user(
    *,
    db: AsyncSession = Depends(deps.get_db),
    user_in: schemas.UserCreateSchemas,
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    """
    Create a staff account (admins only).
    """
    user = await crud.user.create(db, obj_in=user_in)
    await db.commit()
    return user


@router.get("/", response_model=List[schemas.UserSchemas])
async def read_users(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_admin)
) -> Any:
    return await crud.user.get_multi(db, skip=skip, limit=limit)
