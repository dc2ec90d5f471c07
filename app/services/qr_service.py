# app/services/qr_service.py
import io
import logging
import secrets
import time
import uuid
from datetime import datetime, timedelta, timezone

import qrcode
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.db.models.table import Table, TableStatus
from app.schemas.qr import QrTableInfoSchemas, QrTokenSchemas, QrVerificationSchemas

logger = logging.getLogger(__name__)

QR_ALGORITHM = "HS256"


class QrService:
    """
    Issues and checks the signed tokens printed on table QR codes.

    A token is only honored while it is the one stored on the table, so
    regenerating the code invalidates every copy printed before.
    """

    def __init__(self, secret: str = settings.QR_TOKEN_SECRET, frontend_url: str = settings.FRONTEND_URL,
                 expire_days: int = settings.QR_TOKEN_EXPIRE_DAYS):
        self.secret = secret
        self.frontend_url = frontend_url.rstrip("/")
        self.expire_days = expire_days

    def table_url(self, table_id: uuid.UUID, token: str) -> str:
        # Points to the landing page which validates the token and sets up the session
        return f"{self.frontend_url}/table/{table_id}?token={token}"

    async def issue(self, db: AsyncSession, table: Table) -> QrTokenSchemas:
        now = datetime.now(timezone.utc)
        session_id = f"session_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"
        payload = {
            "tableId": str(table.id),
            "tableNumber": table.table_number,
            "timestamp": int(now.timestamp() * 1000),
            "jti": secrets.token_hex(8),
            "exp": now + timedelta(days=self.expire_days),
        }
        token = jwt.encode(payload, self.secret, algorithm=QR_ALGORITHM)
        await crud.table.set_qr_session(db, db_obj=table, token=token, session_id=session_id)
        await db.commit()

        logger.info("Generated new QR session %s for table %s", session_id, table.table_number)
        return QrTokenSchemas(token=token, qr_url=self.table_url(table.id, token), session_id=session_id)

    async def generate(self, db: AsyncSession, table_id: uuid.UUID) -> QrTokenSchemas:
        table = await crud.table.get(db, table_id)
        if not table:
            raise NotFoundError(f"Table with ID {table_id} not found")
        return await self.issue(db, table)

    async def regenerate(self, db: AsyncSession, table_id: uuid.UUID) -> QrTokenSchemas:
        # The previous token stops matching the stored one
        return await self.generate(db, table_id)

    async def verify(self, db: AsyncSession, token: str) -> QrVerificationSchemas:
        try:
            decoded = jwt.decode(token, self.secret, algorithms=[QR_ALGORITHM])
        except ExpiredSignatureError:
            return QrVerificationSchemas(valid=False, error="QR code has expired. Please ask staff for assistance.")
        except JWTError:
            return QrVerificationSchemas(valid=False, error="Invalid QR code")

        try:
            table_id = uuid.UUID(str(decoded.get("tableId")))
        except ValueError:
            return QrVerificationSchemas(valid=False, error="Invalid QR code")

        table = await crud.table.get(db, table_id)
        if not table:
            return QrVerificationSchemas(valid=False, error="Table not found")
        if table.qr_token != token:
            return QrVerificationSchemas(
                valid=False, error="Token has been invalidated. Please scan the new QR code."
            )
        if table.status == TableStatus.INACTIVE:
            return QrVerificationSchemas(valid=False, error="This table is currently inactive")

        return QrVerificationSchemas(
            valid=True,
            table=QrTableInfoSchemas(
                id=table.id,
                table_number=table.table_number,
                capacity=table.capacity,
                location=table.location,
                session_id=table.current_session_id,
                restaurant_name=settings.RESTAURANT_NAME,
            ),
        )

    async def render_png(self, db: AsyncSession, table_id: uuid.UUID) -> bytes:
        table = await crud.table.get(db, table_id)
        if not table or not table.qr_token:
            raise NotFoundError("Table or QR code not found")

        img = qrcode.make(self.table_url(table.id, table.qr_token))
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()


qr_service = QrService()


def get_qr_service() -> QrService:
    return qr_service
