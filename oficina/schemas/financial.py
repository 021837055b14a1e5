"""
Pydantic schemas for financial transactions.
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date as Date, datetime
from typing import Optional

from oficina.constants import TRANSACTION_CATEGORIES
from oficina.models.financial import TransactionType
from oficina.schemas.common import Money


class TransactionBase(BaseModel):
    """Base transaction schema with common fields."""
    type: TransactionType
    category: str = Field(min_length=1)
    description: str = Field(min_length=3)
    amount: Money = Field(gt=0)
    date: Date


class TransactionCreate(TransactionBase):
    """Schema for creating a transaction."""

    @model_validator(mode="after")
    def check_category(self):
        allowed = TRANSACTION_CATEGORIES[self.type]
        if self.category not in allowed:
            raise ValueError(
                f"Category '{self.category}' is not valid for {self.type.value}; "
                f"expected one of: {', '.join(allowed)}"
            )
        return self


class Transaction(BaseModel):
    """Schema for transaction responses; stored rows are returned as they are."""
    id: int
    type: TransactionType
    category: str
    description: Optional[str] = None
    amount: Money
    date: Date
    service_order_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FinancialSummary(BaseModel):
    income: Money
    expenses: Money
    balance: Money
