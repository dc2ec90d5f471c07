# app/schemas/user.py
import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.db.models.user import UserRole


class UserBaseSchemas(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None
    role: UserRole = UserRole.WAITER
    is_active: bool = True


class UserCreateSchemas(UserBaseSchemas):
    password: str = Field(..., min_length=8)


class UserSchemas(UserBaseSchemas):
    id: uuid.UUID

    class Config:
        from_attributes = True
