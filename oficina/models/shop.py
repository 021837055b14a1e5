"""
Shop profile (company settings) model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from oficina.database import Base


class ShopProfile(Base):
    """Single-row table holding the shop's company data."""

    __tablename__ = "shop_profile"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    cnpj = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=False)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String(2), nullable=False)
    cep = Column(String, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
