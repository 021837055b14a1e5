"""
Dashboard route.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload
from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple

from oficina.constants import SERVICE_TYPES, UPCOMING_APPOINTMENT_DAYS
from oficina.database import get_db
from oficina.formatting import format_currency, status_label
from oficina.models.appointment import Appointment, AppointmentStatus
from oficina.models.financial import FinancialTransaction, TransactionType
from oficina.models.part import Part
from oficina.models.service_order import ServiceOrder, ServiceOrderStatus
from oficina.models.user import User
from oficina.schemas.appointment import Appointment as AppointmentSchema
from oficina.schemas.dashboard import Dashboard, TodayService
from oficina.services.totals import D
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def utc_day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Start and end of the shop-local ``day``, as UTC datetimes."""
    start, end = (
        datetime.combine(d, time.min).astimezone().astimezone(timezone.utc)
        for d in (day, day + timedelta(days=1))
    )
    return start, end


def local_clock(value: datetime) -> str:
    # Timestamps read back without an offset are UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone().strftime("%H:%M")


@router.get("/", response_model=Dashboard)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the figures shown on the dashboard cards.
    """
    today = date.today()
    day_start = datetime.combine(today, time.min)
    created_from, created_to = utc_day_bounds(today)

    result = await db.execute(
        select(ServiceOrder)
        .options(selectinload(ServiceOrder.client), selectinload(ServiceOrder.vehicle))
        .where(ServiceOrder.created_at >= created_from, ServiceOrder.created_at < created_to)
        .order_by(ServiceOrder.created_at)
    )
    orders = result.scalars().all()
    today_services = [
        TodayService(
            id=order.id,
            number=order.number,
            client=order.client.name,
            vehicle=f"{order.vehicle.model} {order.vehicle.year or ''}".strip(),
            service=SERVICE_TYPES.get(order.service_type, order.service_type),
            status=order.status,
            status_label=status_label(order.status),
            time=local_clock(order.created_at),
        )
        for order in orders
    ]

    revenue = D(await db.scalar(
        select(func.coalesce(func.sum(FinancialTransaction.amount), 0)).where(
            FinancialTransaction.type == TransactionType.INCOME,
            FinancialTransaction.date == today,
        )
    ))

    now = datetime.now()
    result = await db.execute(
        select(Appointment)
        .options(selectinload(Appointment.client), selectinload(Appointment.vehicle))
        .where(
            Appointment.status == AppointmentStatus.SCHEDULED,
            Appointment.scheduled_at >= now,
            Appointment.scheduled_at < day_start + timedelta(days=UPCOMING_APPOINTMENT_DAYS + 1),
        )
        .order_by(Appointment.scheduled_at)
    )
    upcoming = result.scalars().all()

    open_orders = await db.scalar(
        select(func.count(ServiceOrder.id)).where(
            ServiceOrder.status.in_([ServiceOrderStatus.OPEN, ServiceOrderStatus.IN_PROGRESS])
        )
    )
    low_stock = await db.scalar(
        select(func.count(Part.id)).where(Part.quantity <= func.coalesce(Part.min_quantity, 0))
    )

    return Dashboard(
        today_services_count=len(today_services),
        today_services=today_services,
        today_revenue=revenue,
        today_revenue_display=format_currency(revenue),
        upcoming_appointments_count=len(upcoming),
        upcoming_appointments=[AppointmentSchema.model_validate(a) for a in upcoming],
        open_orders_count=open_orders,
        low_stock_count=low_stock,
    )
