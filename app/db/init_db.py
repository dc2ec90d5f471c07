# app/db/init_db.py
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.config import settings
from app.db.models.user import UserRole
from app.schemas.user import UserCreateSchemas

logger = logging.getLogger(__name__)


async def init_db(db: AsyncSession) -> None:
    """Create the first admin account when configured and missing."""
    if not settings.FIRST_ADMIN_EMAIL or not settings.FIRST_ADMIN_PASSWORD:
        return
    if await crud.user.get_by_email(db, email=settings.FIRST_ADMIN_EMAIL):
        return

    await crud.user.create(
        db,
        obj_in=UserCreateSchemas(
            email=settings.FIRST_ADMIN_EMAIL,
            password=settings.FIRST_ADMIN_PASSWORD,
            full_name="Administrator",
            role=UserRole.ADMIN,
        ),
    )
    await db.commit()
    logger.info("Created first admin account %s", settings.FIRST_ADMIN_EMAIL)
