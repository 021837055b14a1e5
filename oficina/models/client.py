"""
Client model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from oficina.database import Base


class Client(Base):
    """Client database model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    vehicles = relationship(
        "Vehicle", back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    appointments = relationship(
        "Appointment", back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    service_orders = relationship("ServiceOrder", back_populates="client", passive_deletes=True)
