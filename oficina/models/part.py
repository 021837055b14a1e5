"""
Part (inventory item) model for database.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.sql import func
from oficina.database import Base


class Part(Base):
    """Inventory part database model."""

    __tablename__ = "parts"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, default="Outros")
    description = Column(String, nullable=True)
    purchase_price = Column(Numeric(10, 2), nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=True, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= (self.min_quantity or 0)
