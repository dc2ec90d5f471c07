# app/api/deps.py
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core import security
from app.core.config import settings
from app.database import get_db
from app.db.models.user import User, UserRole
from app.schemas.token import TokenPayloadSchemas

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(reusable_oauth2)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        token_data = TokenPayloadSchemas(**security.decode_token(token))
    except (JWTError, ValidationError):
        raise credentials_exception
    if token_data.type != "access" or not token_data.sub:
        raise credentials_exception

    user = await crud.user.get_by_email(db, email=token_data.sub)
    if not user:
        raise credentials_exception
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not crud.user.is_active(current_user):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: the current user must hold one of ``roles``."""

    async def checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="The user doesn't have enough privileges"
            )
        return current_user

    return checker


get_current_admin = require_roles(UserRole.ADMIN)
get_current_kitchen_user = require_roles(UserRole.ADMIN, UserRole.STAFF)
get_current_floor_user = require_roles(UserRole.ADMIN, UserRole.WAITER)
get_current_staff = require_roles(UserRole.ADMIN, UserRole.WAITER, UserRole.STAFF)
