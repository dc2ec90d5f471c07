# app/db/models/menu.py
import enum

from sqlalchemy import (
    Boolean, Column, ForeignKey, Integer, Numeric, String, Text, Uuid, Table as SATable,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class CategoryStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class MenuItemStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    SOLD_OUT = "SOLD_OUT"


class ModifierStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SelectionType(str, enum.Enum):
    SINGLE = "SINGLE"
    MULTIPLE = "MULTIPLE"


modifier_status_type = SAEnum(ModifierStatus, name="modifier_status")

# Association between menu items and the modifier groups offered with them
menu_item_modifier_groups = SATable(
    "menu_item_modifier_groups",
    Base.metadata,
    Column("menu_item_id", Uuid(as_uuid=True), ForeignKey("menu_items.id", ondelete="CASCADE"), primary_key=True),
    Column("modifier_group_id", Uuid(as_uuid=True), ForeignKey("modifier_groups.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    __tablename__ = "categories"

    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    status = Column(SAEnum(CategoryStatus, name="category_status"), default=CategoryStatus.ACTIVE, nullable=False)

    items = relationship("MenuItem", back_populates="category")


class MenuItem(Base):
    __tablename__ = "menu_items"

    category_id = Column(ForeignKey("categories.id"), nullable=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(SAEnum(MenuItemStatus, name="menu_item_status"), default=MenuItemStatus.AVAILABLE, nullable=False)

    category = relationship("Category", back_populates="items")
    modifier_groups = relationship("ModifierGroup", secondary=menu_item_modifier_groups, back_populates="menu_items")


class ModifierGroup(Base):
    __tablename__ = "modifier_groups"

    name = Column(String, nullable=False)
    selection_type = Column(SAEnum(SelectionType, name="selection_type"), default=SelectionType.SINGLE, nullable=False)
    is_required = Column(Boolean, default=False, nullable=False)
    min_selections = Column(Integer, default=0, nullable=False)
    max_selections = Column(Integer, default=0, nullable=False)  # 0 = no limit
    status = Column(modifier_status_type, default=ModifierStatus.ACTIVE, nullable=False)

    options = relationship(
        "ModifierOption", back_populates="group",
        cascade="all, delete-orphan", order_by="ModifierOption.created_at",
    )
    menu_items = relationship("MenuItem", secondary=menu_item_modifier_groups, back_populates="modifier_groups")


class ModifierOption(Base):
    __tablename__ = "modifier_options"

    group_id = Column(ForeignKey("modifier_groups.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    price_adjustment = Column(Numeric(10, 2), default=0, nullable=False)
    status = Column(modifier_status_type, default=ModifierStatus.ACTIVE, nullable=False)

    group = relationship("ModifierGroup", back_populates="options")
