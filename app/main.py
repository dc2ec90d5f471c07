from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router_v1
from app.core.config import settings
from app.core.exceptions import AppError
from app.core.logging import logger, setup_logging
from app.database import AsyncSessionLocal, engine
from app.db import base_class
from app.db import models  # noqa: F401  registers every table on Base.metadata
from app.db.init_db import init_db
from app.services.connection_manager import manager
from app.services.redis_service import redis_client, shutdown_redis_client, startup_redis_client

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Restaurant ordering API - QR table ordering, kitchen workflow, payments and realtime notifications",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    contact={
        "name": "Technical Support",
        "email": settings.SUPPORT_EMAIL,
    },
    license_info={
        "name": "MIT",
    },
)

# CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Development only: create tables on startup. Use Alembic migrations in production.
if settings.ENVIRONMENT == "development":
    @app.on_event("startup")
    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(base_class.Base.metadata.create_all)
        logger.info("Tables created (development only)")


@app.on_event("startup")
async def bootstrap():
    async with AsyncSessionLocal() as db:
        await init_db(db)
    await startup_redis_client()


@app.on_event("shutdown")
async def shutdown():
    await shutdown_redis_client()


# All V1 routes, websocket included
app.include_router(api_router_v1, prefix=settings.API_V1_STR)


@app.get("/", tags=["Root"])
async def read_root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} v{settings.PROJECT_VERSION}",
        "docs": "/docs",
        "status": "operational",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["Health Check"])
async def health_check():
    """API health check"""
    redis_state = "disabled"
    if settings.REDIS_ENABLED:
        redis_state = "connected" if redis_client.connected else "disconnected"
    return {
        "status": "healthy",
        "database": "connected" if settings.DATABASE_URL else "disconnected",
        "environment": settings.ENVIRONMENT,
        "redis": redis_state,
        "websocket_connections": manager.connection_count,
    }
