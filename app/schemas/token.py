# app/schemas/token.py
from typing import Optional

from pydantic import BaseModel


class TokenSchemas(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenPayloadSchemas(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None
    type: Optional[str] = None
