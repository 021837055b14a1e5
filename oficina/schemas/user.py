"""
Pydantic schemas for User and Authentication.
"""
from pydantic import BaseModel, EmailStr, ConfigDict, Field, computed_field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from oficina.formatting import get_initials
from oficina.models.user import UserRole
from oficina.schemas.common import reject_null


class UserBase(BaseModel):
    """Base user schema with common fields."""
    username: str = Field(min_length=3)
    email: EmailStr
    name: str = Field(min_length=3)
    role: UserRole = UserRole.ATTENDANT


class UserCreate(UserBase):
    """Schema for creating a user. The password must be typed twice."""
    password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserUpdate(BaseModel):
    """Schema for updating a user."""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=3)
    role: Optional[UserRole] = None
    password: Optional[str] = Field(default=None, min_length=6)
    confirm_password: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("email", "name", "role", "is_active")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password is not None and self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class User(UserBase):
    """Schema for user responses."""
    id: int
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def initials(self) -> str:
        return get_initials(self.name)


class Token(BaseModel):
    """Schema for authentication token."""
    access_token: str
    token_type: str


class LoginRequest(BaseModel):
    """Schema for login request."""
    username: str
    password: str
