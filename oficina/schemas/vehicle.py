"""
Pydantic schemas for Vehicle.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Optional

from oficina.schemas.common import reject_null, strip_or_none


def _normalize_plate(value):
    if isinstance(value, str):
        return value.strip().upper()
    return value


class VehicleBase(BaseModel):
    """Base vehicle schema with common fields."""
    model: str = Field(min_length=3)
    plate: str = Field(min_length=7, max_length=8)
    year: Optional[str] = Field(default=None, pattern=r"^\d{4}$")
    color: Optional[str] = None

    @field_validator("plate", mode="before")
    @classmethod
    def normalize_plate(cls, value):
        return _normalize_plate(value)

    @field_validator("year", "color", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        if isinstance(value, int):
            value = str(value)
        return strip_or_none(value)


class VehicleCreate(VehicleBase):
    """Schema for creating a vehicle."""
    client_id: int


class VehicleUpdate(BaseModel):
    """Schema for updating a vehicle."""
    client_id: Optional[int] = None
    model: Optional[str] = Field(default=None, min_length=3)
    plate: Optional[str] = Field(default=None, min_length=7, max_length=8)
    year: Optional[str] = Field(default=None, pattern=r"^\d{4}$")
    color: Optional[str] = None

    @field_validator("plate", mode="before")
    @classmethod
    def normalize_plate(cls, value):
        return _normalize_plate(value)

    @field_validator("client_id", "model", "plate")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class Vehicle(VehicleBase):
    """Schema for vehicle responses."""
    id: int
    client_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VehicleSummary(BaseModel):
    """Compact vehicle shown inside other resources."""
    id: int
    model: str
    plate: str
    year: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
