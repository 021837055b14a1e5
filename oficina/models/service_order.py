"""
Service order (OS) models for database.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from oficina.database import Base
import enum


class ServiceOrderStatus(str, enum.Enum):
    """Service order status enumeration."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ServiceOrder(Base):
    """Service order database model."""

    __tablename__ = "service_orders"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, unique=True, nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    service_type = Column(String, nullable=False)
    description = Column(String, nullable=True)
    labor_cost = Column(Numeric(10, 2), nullable=False)
    parts_cost = Column(Numeric(10, 2), nullable=False, default=0)
    total_cost = Column(Numeric(10, 2), nullable=False)
    status = Column(SQLEnum(ServiceOrderStatus), default=ServiceOrderStatus.OPEN, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    client = relationship("Client", back_populates="service_orders")
    vehicle = relationship("Vehicle", back_populates="service_orders")
    parts = relationship(
        "ServiceOrderPart",
        back_populates="service_order",
        cascade="all, delete-orphan",
        order_by="ServiceOrderPart.id",
    )
    transactions = relationship("FinancialTransaction", back_populates="service_order", passive_deletes=True)


class ServiceOrderPart(Base):
    """A part line on a service order. The unit price is frozen at order time."""

    __tablename__ = "service_order_parts"

    id = Column(Integer, primary_key=True, index=True)
    service_order_id = Column(Integer, ForeignKey("service_orders.id", ondelete="CASCADE"), nullable=False)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)

    # Relationships
    service_order = relationship("ServiceOrder", back_populates="parts")
    part = relationship("Part")

    @property
    def name(self) -> str:
        return self.part.name if self.part is not None else ""
