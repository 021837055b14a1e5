"""
Agenda (appointment) routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from oficina.constants import APPOINTMENT_SERVICES, TIME_SLOTS
from oficina.database import get_db
from oficina.errors import BusinessRuleError, ConflictError, NotFoundError
from oficina.logging_config import get_logger
from oficina.models.appointment import Appointment, AppointmentStatus
from oficina.models.client import Client
from oficina.models.vehicle import Vehicle
from oficina.models.user import User
from oficina.schemas.appointment import (
    AgendaWeek,
    Appointment as AppointmentSchema,
    AppointmentCreate,
    AppointmentUpdate,
    ConvertAppointment,
    WeekDay,
)
from oficina.schemas.service_order import ServiceOrder as ServiceOrderSchema
from oficina.services import work_orders
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/appointments", tags=["agenda"])
logger = get_logger(__name__)


def week_of(day: date) -> List[date]:
    """The seven days of the Sunday-started week containing ``day``."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return [start + timedelta(days=offset) for offset in range(7)]


def _day_bounds(start: date, end: date):
    return datetime.combine(start, time.min), datetime.combine(end, time.min) + timedelta(days=1)


def _with_relations():
    return select(Appointment).options(
        selectinload(Appointment.client),
        selectinload(Appointment.vehicle),
    ).execution_options(populate_existing=True)


async def _get_appointment_or_404(db: AsyncSession, appointment_id: int) -> Appointment:
    result = await db.execute(_with_relations().where(Appointment.id == appointment_id))
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFoundError("Appointment")
    return appointment


async def _validate(
    db: AsyncSession,
    client_id: int,
    vehicle_id: int,
    scheduled_at: datetime,
    appointment_id: Optional[int] = None,
):
    if not await db.get(Client, client_id):
        raise NotFoundError("Client")
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle")
    if vehicle.client_id != client_id:
        raise BusinessRuleError("Vehicle does not belong to the selected client")

    query = select(Appointment.id).where(
        Appointment.vehicle_id == vehicle_id,
        Appointment.scheduled_at == scheduled_at,
        Appointment.status != AppointmentStatus.CANCELLED,
    )
    if appointment_id is not None:
        query = query.where(Appointment.id != appointment_id)
    if (await db.execute(query)).first():
        raise ConflictError("Vehicle already has an appointment at this time")


@router.get("/", response_model=List[AppointmentSchema])
async def get_appointments(
    day: Optional[date] = None,
    status_filter: Optional[AppointmentStatus] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the appointments of a day (today by default), ordered by time.
    """
    day = day or date.today()
    start, end = _day_bounds(day, day)
    query = _with_relations().where(
        Appointment.scheduled_at >= start,
        Appointment.scheduled_at < end,
    )
    if status_filter:
        query = query.where(Appointment.status == status_filter)

    result = await db.execute(query.order_by(Appointment.scheduled_at))
    return result.scalars().all()


@router.get("/week", response_model=AgendaWeek)
async def get_week(
    day: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the week strip around a day with how many appointments each day has.
    """
    days = week_of(day or date.today())
    start, end = _day_bounds(days[0], days[-1])
    result = await db.execute(
        select(Appointment.scheduled_at).where(
            Appointment.scheduled_at >= start,
            Appointment.scheduled_at < end,
            Appointment.status != AppointmentStatus.CANCELLED,
        )
    )
    counts = {d: 0 for d in days}
    for (scheduled_at,) in result.all():
        counts[scheduled_at.date()] += 1

    return AgendaWeek(
        start=days[0],
        end=days[-1],
        days=[WeekDay(day=d, has_appointments=counts[d] > 0, count=counts[d]) for d in days],
    )


@router.get("/options")
async def get_options(current_user: User = Depends(get_current_active_user)):
    """
    Get the time slots and service types offered by the agenda form.
    """
    return {"time_slots": TIME_SLOTS, "service_types": APPOINTMENT_SERVICES}


@router.get("/{appointment_id}", response_model=AppointmentSchema)
async def get_appointment(
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific appointment by ID.
    """
    return await _get_appointment_or_404(db, appointment_id)


@router.post("/", response_model=AppointmentSchema, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Schedule a new appointment.
    """
    await _validate(db, appointment.client_id, appointment.vehicle_id, appointment.scheduled_at)

    db_appointment = Appointment(**appointment.model_dump())
    db.add(db_appointment)
    await db.commit()

    logger.info(f"Appointment {db_appointment.id} scheduled for {db_appointment.scheduled_at}")
    return await _get_appointment_or_404(db, db_appointment.id)


@router.put("/{appointment_id}", response_model=AppointmentSchema)
async def update_appointment(
    appointment_id: int,
    appointment_update: AppointmentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update or cancel a scheduled appointment.
    """
    db_appointment = await _get_appointment_or_404(db, appointment_id)
    if db_appointment.status != AppointmentStatus.SCHEDULED:
        raise BusinessRuleError(f"Appointment is already {db_appointment.status.value}")

    # Update only provided fields
    update_data = appointment_update.model_dump(exclude_unset=True)
    await _validate(
        db,
        update_data.get("client_id", db_appointment.client_id),
        update_data.get("vehicle_id", db_appointment.vehicle_id),
        update_data.get("scheduled_at", db_appointment.scheduled_at),
        appointment_id,
    )
    for field, value in update_data.items():
        setattr(db_appointment, field, value)

    await db.commit()

    return await _get_appointment_or_404(db, appointment_id)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete an appointment.
    """
    db_appointment = await _get_appointment_or_404(db, appointment_id)

    await db.delete(db_appointment)
    await db.commit()

    return None


@router.post(
    "/{appointment_id}/service-order",
    response_model=ServiceOrderSchema,
    status_code=status.HTTP_201_CREATED,
)
async def convert_to_service_order(
    appointment_id: int,
    payload: Optional[ConvertAppointment] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Open a service order from an appointment.
    """
    labor_cost = payload.labor_cost if payload else None
    return await work_orders.convert_appointment(db, appointment_id, labor_cost)
