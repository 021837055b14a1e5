"""
Pydantic schemas for request/response validation.
"""
from oficina.schemas.client import ClientBase, ClientCreate, ClientUpdate, Client
from oficina.schemas.vehicle import VehicleBase, VehicleCreate, VehicleUpdate, Vehicle
from oficina.schemas.appointment import AppointmentCreate, AppointmentUpdate, Appointment, AgendaWeek
from oficina.schemas.part import PartCreate, PartUpdate, Part, PartsSummary, StockAdjustment
from oficina.schemas.service import ServiceCreate, ServiceUpdate, Service, ServiceType
from oficina.schemas.service_order import (
    ServiceOrderCreate, ServiceOrderUpdate, ServiceOrderStatusUpdate,
    ServiceOrder, ServiceOrderListItem, ServiceOrderPreview, ServiceOrderDraft,
)
from oficina.schemas.financial import TransactionCreate, Transaction, FinancialSummary
from oficina.schemas.shop import ShopProfile, ShopProfileUpdate
from oficina.schemas.user import UserBase, UserCreate, UserUpdate, User, Token, LoginRequest
from oficina.schemas.dashboard import Dashboard

__all__ = [
    "ClientBase", "ClientCreate", "ClientUpdate", "Client",
    "VehicleBase", "VehicleCreate", "VehicleUpdate", "Vehicle",
    "AppointmentCreate", "AppointmentUpdate", "Appointment", "AgendaWeek",
    "PartCreate", "PartUpdate", "Part", "PartsSummary", "StockAdjustment",
    "ServiceCreate", "ServiceUpdate", "Service", "ServiceType",
    "ServiceOrderCreate", "ServiceOrderUpdate", "ServiceOrderStatusUpdate",
    "ServiceOrder", "ServiceOrderListItem", "ServiceOrderPreview", "ServiceOrderDraft",
    "TransactionCreate", "Transaction", "FinancialSummary",
    "ShopProfile", "ShopProfileUpdate",
    "UserBase", "UserCreate", "UserUpdate", "User", "Token", "LoginRequest",
    "Dashboard",
]
