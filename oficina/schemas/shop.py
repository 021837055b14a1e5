"""
Pydantic schemas for the shop profile.
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ShopProfileBase(BaseModel):
    """Company data printed on documents and reports."""
    name: str = Field(min_length=3)
    cnpj: str = Field(min_length=14)
    phone: str = Field(min_length=10)
    email: EmailStr
    address: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=2, max_length=2, pattern=r"^[A-Za-z]{2}$")
    cep: str = Field(min_length=8)

    @field_validator("state")
    @classmethod
    def upper_state(cls, value):
        return value.upper()


class ShopProfileUpdate(ShopProfileBase):
    pass


class ShopProfile(ShopProfileBase):
    model_config = ConfigDict(from_attributes=True)
