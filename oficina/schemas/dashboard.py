"""
Pydantic schemas for the dashboard.
"""
from pydantic import BaseModel
from typing import List

from oficina.models.service_order import ServiceOrderStatus
from oficina.schemas.appointment import Appointment
from oficina.schemas.common import Money


class TodayService(BaseModel):
    id: int
    number: int
    client: str
    vehicle: str
    service: str
    status: ServiceOrderStatus
    status_label: str
    time: str


class Dashboard(BaseModel):
    today_services_count: int
    today_services: List[TodayService]
    today_revenue: Money
    today_revenue_display: str
    upcoming_appointments_count: int
    upcoming_appointments: List[Appointment]
    open_orders_count: int
    low_stock_count: int
