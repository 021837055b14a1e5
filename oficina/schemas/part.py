"""
Pydantic schemas for Part.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional

from oficina.constants import PART_CATEGORIES
from oficina.schemas.common import Money, reject_null


def _check_category(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in PART_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(PART_CATEGORIES)}")
    return value


class PartBase(BaseModel):
    """Base part schema with common fields."""
    code: str = Field(min_length=1)
    name: str = Field(min_length=3)
    category: str
    description: Optional[str] = None
    purchase_price: Money = Field(ge=0)
    price: Money = Field(ge=0)
    quantity: int = Field(ge=0)
    min_quantity: int = Field(default=0, ge=0)

    @field_validator("code", "name", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("category")
    @classmethod
    def check_category(cls, value):
        return _check_category(value)


class PartCreate(PartBase):
    """Schema for creating a part."""
    pass


class PartUpdate(BaseModel):
    """Schema for updating a part."""
    code: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=3)
    category: Optional[str] = None
    description: Optional[str] = None
    purchase_price: Optional[Money] = Field(default=None, ge=0)
    price: Optional[Money] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    min_quantity: Optional[int] = Field(default=None, ge=0)

    @field_validator("category")
    @classmethod
    def check_category(cls, value):
        return _check_category(value)

    @field_validator("code", "name", "category", "purchase_price", "price", "quantity")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class Part(BaseModel):
    """Schema for part responses."""
    id: int
    code: str
    name: str
    category: str
    description: Optional[str] = None
    purchase_price: Money
    price: Money
    quantity: int
    min_quantity: Optional[int] = 0
    is_low_stock: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StockAdjustment(BaseModel):
    """Manual stock movement; negative deltas remove items."""
    delta: int
    reason: Optional[str] = None


class PartsSummary(BaseModel):
    total_items: int
    part_count: int
    low_stock_count: int
