"""
Vehicle model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from oficina.database import Base


class Vehicle(Base):
    """Vehicle database model."""

    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    model = Column(String, nullable=False)
    plate = Column(String, unique=True, nullable=False, index=True)
    year = Column(String(4), nullable=True)
    color = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    client = relationship("Client", back_populates="vehicles")
    appointments = relationship(
        "Appointment", back_populates="vehicle", cascade="all, delete-orphan", passive_deletes=True
    )
    service_orders = relationship("ServiceOrder", back_populates="vehicle", passive_deletes=True)
