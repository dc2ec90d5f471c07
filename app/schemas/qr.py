# app/schemas/qr.py
import uuid
from typing import Optional

from pydantic import BaseModel


class QrTokenSchemas(BaseModel):
    token: str
    qr_url: str
    session_id: str


class QrTableInfoSchemas(BaseModel):
    id: uuid.UUID
    table_number: str
    capacity: int
    location: Optional[str] = None
    session_id: Optional[str] = None
    restaurant_name: str


class QrVerificationSchemas(BaseModel):
    valid: bool
    table: Optional[QrTableInfoSchemas] = None
    error: Optional[str] = None
