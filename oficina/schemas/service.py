"""
Pydantic schemas for the service catalog.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from oficina.schemas.common import Money, reject_null, strip_or_none


class ServiceBase(BaseModel):
    """Base service schema with common fields."""
    name: str = Field(min_length=3)
    description: Optional[str] = None
    default_price: Optional[Money] = Field(default=None, ge=0)

    @field_validator("default_price", mode="before")
    @classmethod
    def blank_price(cls, value):
        return strip_or_none(value)


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""
    pass


class ServiceUpdate(BaseModel):
    """Schema for updating a service."""
    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = None
    default_price: Optional[Money] = Field(default=None, ge=0)

    @field_validator("default_price", mode="before")
    @classmethod
    def blank_price(cls, value):
        return strip_or_none(value)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return reject_null(value)


class Service(ServiceBase):
    """Schema for service responses."""
    id: int

    model_config = ConfigDict(from_attributes=True)


class ServiceType(BaseModel):
    """A built-in service-order type."""
    code: str
    label: str
