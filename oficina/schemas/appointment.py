"""
Pydantic schemas for Appointment.
"""
from pydantic import BaseModel, ConfigDict, computed_field, field_validator
from datetime import date, datetime
from typing import List, Optional

from oficina.constants import APPOINTMENT_SERVICES, TIME_SLOTS
from oficina.models.appointment import AppointmentStatus
from oficina.schemas.common import Money, reject_null, strip_or_none
from oficina.schemas.client import ClientSummary
from oficina.schemas.vehicle import VehicleSummary


def _check_slot(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return value
    if value.strftime("%H:%M") not in TIME_SLOTS or value.second or value.microsecond:
        raise ValueError(f"Time must be one of the agenda slots: {', '.join(TIME_SLOTS)}")
    # Agenda times are wall-clock times for the shop
    return value.replace(tzinfo=None)


def _check_service(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in APPOINTMENT_SERVICES:
        raise ValueError(f"Unknown service type '{value}'")
    return value


class AppointmentBase(BaseModel):
    """Base appointment schema with common fields."""
    client_id: int
    vehicle_id: int
    service_type: str
    scheduled_at: datetime
    description: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def check_slot(cls, value):
        return _check_slot(value)

    @field_validator("service_type")
    @classmethod
    def check_service(cls, value):
        return _check_service(value)


class AppointmentCreate(AppointmentBase):
    """Schema for creating an appointment."""
    pass


class AppointmentUpdate(BaseModel):
    """Schema for updating an appointment."""
    client_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    service_type: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    description: Optional[str] = None
    status: Optional[AppointmentStatus] = None

    @field_validator("scheduled_at")
    @classmethod
    def check_slot(cls, value):
        return _check_slot(value)

    @field_validator("service_type")
    @classmethod
    def check_service(cls, value):
        return _check_service(value)

    @field_validator("client_id", "vehicle_id", "service_type", "scheduled_at", "status")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)

    @field_validator("status")
    @classmethod
    def only_cancel(cls, value):
        # Conversion is the only way to reach "converted"
        if value != AppointmentStatus.CANCELLED:
            raise ValueError("Appointments can only be cancelled through an update")
        return value


class Appointment(BaseModel):
    """Schema for appointment responses."""
    id: int
    client_id: int
    vehicle_id: int
    service_type: str
    scheduled_at: datetime
    description: Optional[str] = None
    status: AppointmentStatus
    client: Optional[ClientSummary] = None
    vehicle: Optional[VehicleSummary] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def time(self) -> str:
        return self.scheduled_at.strftime("%H:%M")


class WeekDay(BaseModel):
    """One day of the agenda week strip."""
    day: date
    has_appointments: bool
    count: int


class AgendaWeek(BaseModel):
    start: date
    end: date
    days: List[WeekDay]


class ConvertAppointment(BaseModel):
    """Payload for turning an appointment into a service order."""
    labor_cost: Optional[Money] = None

    @field_validator("labor_cost", mode="before")
    @classmethod
    def blank_labor(cls, value):
        return strip_or_none(value)
