# app/db/models/table.py
import enum

from sqlalchemy import Column, String, Integer, Enum as SAEnum
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class TableStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    INACTIVE = "INACTIVE"


class Table(Base):
    table_number = Column(String, nullable=False, unique=True, index=True)  # Ex: "T01", "Bar 3"
    capacity = Column(Integer, nullable=False, default=4)
    location = Column(String, nullable=True)
    status = Column(SAEnum(TableStatus, name="table_status"), default=TableStatus.AVAILABLE, nullable=False)

    # Only the token stored here is accepted; regenerating replaces it
    qr_token = Column(String, nullable=True)
    current_session_id = Column(String, nullable=True)

    orders = relationship("Order", back_populates="table")
