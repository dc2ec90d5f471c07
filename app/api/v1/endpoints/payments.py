# app/api/v1/endpoints/payments.py
import uuid
from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.db.models.user import User
from app.schemas.payment import PaymentCreateSchemas, PaymentSchemas
from app.services.payment_service import PaymentService, get_payment_service

router = APIRouter()


@router.post("/", response_model=PaymentSchemas, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_in: PaymentCreateSchemas,
    db: AsyncSession = Depends(deps.get_db),
    service: PaymentService = Depends(get_payment_service),
) -> Any:
    """
    Register a payment for an order. It stays PENDING until staff confirm it.
    Several payments may be registered to split the bill.
    """
    return await service.create_payment(db, payment_in)


@router.post("/{payment_id}/confirm", response_model=PaymentSchemas)
async def confirm_payment(
    payment_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: PaymentService = Depends(get_payment_service),
    current_user: User = Depends(deps.get_current_floor_user),
) -> Any:
    return await service.confirm_payment(db, payment_id)


@router.get("/order/{order_id}", response_model=List[PaymentSchemas])
async def read_order_payments(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    service: PaymentService = Depends(get_payment_service),
) -> Any:
    return await service.list_payments(db, order_id)
