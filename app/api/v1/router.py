# app/api/v1/router.py
from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    users,
    tables,
    menu,
    orders,
    kitchen,
    payments,
    qr,
    realtime,
)

api_router_v1 = APIRouter()

api_router_v1.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router_v1.include_router(users.router, prefix="/users", tags=["Users"])
api_router_v1.include_router(tables.router, prefix="/tables", tags=["Tables"])
api_router_v1.include_router(menu.router, prefix="/menu", tags=["Menu"])
api_router_v1.include_router(orders.router, prefix="/orders", tags=["Orders"])
api_router_v1.include_router(kitchen.router, prefix="/kitchen", tags=["Kitchen"])
api_router_v1.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router_v1.include_router(qr.router, prefix="/qr", tags=["QR Codes"])
api_router_v1.include_router(realtime.router, tags=["Realtime"])


@api_router_v1.get("/", tags=["Root V1"])
async def read_root_v1():
    return {"message": "API V1 operational"}
