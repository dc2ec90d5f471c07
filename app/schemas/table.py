# app/schemas/table.py
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.db.models.table import TableStatus


class TableBaseSchemas(BaseModel):
    table_number: str = Field(..., min_length=1, max_length=50)
    capacity: int = Field(4, ge=1, le=50)
    location: Optional[str] = None


class TableCreateSchemas(TableBaseSchemas):
    pass


class TableUpdateSchemas(BaseModel):
    table_number: Optional[str] = Field(None, min_length=1, max_length=50)
    capacity: Optional[int] = Field(None, ge=1, le=50)
    location: Optional[str] = None
    status: Optional[TableStatus] = None
    # qr_token is never updated directly, see the QR endpoints


class TableSchemas(TableBaseSchemas):
    id: uuid.UUID
    status: TableStatus
    qr_token: Optional[str] = None
    current_session_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TableSummarySchemas(BaseModel):
    id: uuid.UUID
    table_number: str
    location: Optional[str] = None

    class Config:
        from_attributes = True
