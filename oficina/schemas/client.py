"""
Pydantic schemas for Client.
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional

from oficina.schemas.common import reject_null, strip_or_none


class ClientBase(BaseModel):
    """Base client schema with common fields."""
    name: str = Field(min_length=3)
    phone: Optional[str] = Field(default=None, min_length=10)
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("phone", "email", "address", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        return strip_or_none(value)


class ClientCreate(ClientBase):
    """Schema for creating a client."""
    pass


class ClientUpdate(BaseModel):
    """Schema for updating a client."""
    name: Optional[str] = Field(default=None, min_length=3)
    phone: Optional[str] = Field(default=None, min_length=10)
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return reject_null(value)


class Client(ClientBase):
    """Schema for client responses."""
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ClientSummary(BaseModel):
    """Compact client shown inside other resources."""
    id: int
    name: str
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
