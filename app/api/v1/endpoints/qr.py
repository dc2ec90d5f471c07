# app/api/v1/endpoints/qr.py
import uuid
from typing import Any

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.user import User
from app.schemas.qr import QrTokenSchemas, QrVerificationSchemas
from app.services.qr_service import QrService, get_qr_service

router = APIRouter()


@router.post("/tables/{table_id}/generate", response_model=QrTokenSchemas)
async def generate_qr(
    table_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    qr: QrService = Depends(get_qr_service),
    current_user: User = Depends(deps.get_current_admin),
) -> Any:
    return await qr.generate(db, table_id)


@router.post("/tables/{table_id}/regenerate", response_model=QrTokenSchemas)
async def regenerate_qr(
    table_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    qr: QrService = Depends(get_qr_service),
    current_user: User = Depends(deps.get_current_admin),
) -> Any:
    """
    Issue a new token; codes printed before stop working.
    """
    return await qr.regenerate(db, table_id)


@router.get("/verify", response_model=QrVerificationSchemas)
async def verify_qr(
    token: str,
    db: AsyncSession = Depends(deps.get_db),
    qr: QrService = Depends(get_qr_service),
) -> Any:
    return await qr.verify(db, token)


@router.get("/tables/{table_id}/image")
async def read_qr_image(
    table_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    qr: QrService = Depends(get_qr_service),
    current_user: User = Depends(deps.get_current_admin),
):
    """
    PNG of the table's current QR code, for printing.
    """
    png = await qr.render_png(db, table_id)
    return Response(content=png, media_type="image/png")
