# app/db/models/user.py
import enum

from sqlalchemy import Column, String, Boolean, Enum as SAEnum

from app.db.base_class import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    WAITER = "WAITER"
    STAFF = "STAFF"  # kitchen staff


class User(Base):
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    role = Column(SAEnum(UserRole, name="user_role"), default=UserRole.WAITER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
