import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Uuid, func
from sqlalchemy.orm import declarative_base, declared_attr


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Base:
    """
    Base class which provides automated table name,
    surrogate UUID primary key and audit timestamps.
    """

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"  # Ex: Payment -> payments

    # The id can be overridden on specific models if needed.
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    # Python-side defaults keep the values loaded on the instance after flush
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)


Base = declarative_base(cls=_Base)
