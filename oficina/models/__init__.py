"""
SQLAlchemy database models.
"""
from oficina.models.client import Client
from oficina.models.vehicle import Vehicle
from oficina.models.appointment import Appointment, AppointmentStatus
from oficina.models.part import Part
from oficina.models.service import Service
from oficina.models.service_order import ServiceOrder, ServiceOrderPart, ServiceOrderStatus
from oficina.models.financial import FinancialTransaction, TransactionType
from oficina.models.shop import ShopProfile
from oficina.models.user import User, UserRole

__all__ = [
    "Client", "Vehicle", "Appointment", "AppointmentStatus", "Part", "Service",
    "ServiceOrder", "ServiceOrderPart", "ServiceOrderStatus",
    "FinancialTransaction", "TransactionType", "ShopProfile", "User", "UserRole",
]
