"""
Financial transaction model for database.
"""
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from oficina.database import Base
import enum


class TransactionType(str, enum.Enum):
    """Ledger entry direction."""
    INCOME = "income"
    EXPENSE = "expense"


class FinancialTransaction(Base):
    """Financial transaction database model."""

    __tablename__ = "financial_transactions"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(SQLEnum(TransactionType), nullable=False, index=True)
    category = Column(String, nullable=False)
    description = Column(String, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    service_order_id = Column(Integer, ForeignKey("service_orders.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    service_order = relationship("ServiceOrder", back_populates="transactions")
