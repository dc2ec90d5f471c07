# app/schemas/menu.py
import uuid
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.db.models.menu import CategoryStatus, MenuItemStatus, ModifierStatus, SelectionType


# --- Category ---
class CategoryCreateSchemas(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CategorySchemas(CategoryCreateSchemas):
    id: uuid.UUID
    status: CategoryStatus

    class Config:
        from_attributes = True


# --- Modifiers ---
class ModifierOptionCreateSchemas(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    price_adjustment: Decimal = Decimal("0")


class ModifierOptionSchemas(ModifierOptionCreateSchemas):
    id: uuid.UUID
    status: ModifierStatus

    class Config:
        from_attributes = True


class ModifierGroupCreateSchemas(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    selection_type: SelectionType = SelectionType.SINGLE
    is_required: bool = False
    min_selections: int = Field(0, ge=0)
    max_selections: int = Field(0, ge=0)
    options: List[ModifierOptionCreateSchemas] = []

    @model_validator(mode="after")
    def check_selection_range(self):
        if self.max_selections and self.min_selections > self.max_selections:
            raise ValueError("min_selections cannot be greater than max_selections")
        return self


class ModifierGroupSchemas(BaseModel):
    id: uuid.UUID
    name: str
    selection_type: SelectionType
    is_required: bool
    min_selections: int
    max_selections: int
    status: ModifierStatus
    options: List[ModifierOptionSchemas] = []

    class Config:
        from_attributes = True


# --- Menu item ---
class MenuItemCreateSchemas(BaseModel):
    category_id: Optional[uuid.UUID] = None
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    status: MenuItemStatus = MenuItemStatus.AVAILABLE
    modifier_group_ids: List[uuid.UUID] = []


class MenuItemSchemas(BaseModel):
    id: uuid.UUID
    category_id: Optional[uuid.UUID] = None
    name: str
    description: Optional[str] = None
    price: Decimal
    status: MenuItemStatus
    modifier_groups: List[ModifierGroupSchemas] = []

    class Config:
        from_attributes = True


class AttachModifierGroupsSchemas(BaseModel):
    modifier_group_ids: List[uuid.UUID]
