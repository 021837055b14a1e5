"""
Service catalog model for database.
"""
from sqlalchemy import Column, Integer, String, Numeric
from oficina.database import Base


class Service(Base):
    """A service the shop offers, with an optional default labor price."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=True)
    default_price = Column(Numeric(10, 2), nullable=True)
