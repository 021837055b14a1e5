"""
Service order (OS) workflow.

An order is assembled as a :class:`WorkOrderDraft`: parts are added one line
at a time and checked against stock, and the parts and order totals are
recomputed from the lines on every change. Persisting a draft freezes each
line's unit price, takes the parts out of stock and numbers the order.

Status changes follow ``open -> in_progress -> completed`` with cancellation
allowed from any non-terminal state. Completing records the order's revenue;
cancelling puts its parts back in stock.
"""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from oficina.constants import APPOINTMENT_SERVICES, SERVICE_REVENUE_CATEGORY, SERVICE_TYPES
from oficina.errors import (
    BusinessRuleError,
    ConflictError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
)
from oficina.logging_config import get_logger
from oficina.models.appointment import Appointment, AppointmentStatus
from oficina.models.client import Client
from oficina.models.financial import FinancialTransaction, TransactionType
from oficina.models.part import Part
from oficina.models.service import Service
from oficina.models.service_order import ServiceOrder, ServiceOrderPart, ServiceOrderStatus
from oficina.models.vehicle import Vehicle
from oficina.schemas.service_order import ServiceOrderCreate, ServiceOrderPartIn
from oficina.services.totals import D, ZERO, line_subtotal, parse_money, parts_total

logger = get_logger(__name__)

ALLOWED_TRANSITIONS = {
    ServiceOrderStatus.OPEN: {
        ServiceOrderStatus.IN_PROGRESS,
        ServiceOrderStatus.COMPLETED,
        ServiceOrderStatus.CANCELLED,
    },
    ServiceOrderStatus.IN_PROGRESS: {
        ServiceOrderStatus.COMPLETED,
        ServiceOrderStatus.CANCELLED,
    },
    ServiceOrderStatus.COMPLETED: set(),
    ServiceOrderStatus.CANCELLED: set(),
}

DELETABLE_STATUSES = {ServiceOrderStatus.OPEN, ServiceOrderStatus.CANCELLED}

ORDER_NUMBER_ATTEMPTS = 3


@dataclass
class DraftLine:
    line_id: str
    part_id: int
    name: str
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return line_subtotal(self.price, self.quantity)


@dataclass
class WorkOrderDraft:
    """Parts list and labor of an order that has not been saved yet."""

    lines: List[DraftLine] = field(default_factory=list)
    labor_cost: Decimal = ZERO

    def drafted_quantity(self, part_id: int) -> int:
        return sum(line.quantity for line in self.lines if line.part_id == part_id)

    def add_part(self, part: Part, quantity: int = 1) -> DraftLine:
        """
        Add ``quantity`` units of ``part`` as a new line.

        Raises:
            BusinessRuleError: quantity below one.
            InsufficientStockError: the part's stock does not cover what is
                already drafted plus ``quantity``.
        """
        if quantity < 1:
            raise BusinessRuleError("Quantity must be at least 1")

        requested = self.drafted_quantity(part.id) + quantity
        if requested > part.quantity:
            raise InsufficientStockError(part.name, requested, part.quantity)

        line = DraftLine(
            line_id=uuid.uuid4().hex,
            part_id=part.id,
            name=part.name,
            quantity=quantity,
            price=D(part.price),
        )
        self.lines.append(line)
        return line

    def remove_part(self, line_id: str) -> DraftLine:
        for index, line in enumerate(self.lines):
            if line.line_id == line_id:
                return self.lines.pop(index)
        raise NotFoundError("Part line")

    def set_labor_cost(self, value) -> Decimal:
        """Set labor from user input; empty or invalid input counts as zero."""
        self.labor_cost = parse_money(value) or ZERO
        return self.labor_cost

    @property
    def parts_cost(self) -> Decimal:
        return parts_total(self.lines)

    @property
    def total_cost(self) -> Decimal:
        return D(self.parts_cost + self.labor_cost)

    def quantities(self) -> Dict[int, int]:
        totals: Dict[int, int] = {}
        for line in self.lines:
            totals[line.part_id] = totals.get(line.part_id, 0) + line.quantity
        return totals


def _order_query():
    return select(ServiceOrder).options(
        selectinload(ServiceOrder.client),
        selectinload(ServiceOrder.vehicle),
        selectinload(ServiceOrder.parts).selectinload(ServiceOrderPart.part),
    ).execution_options(populate_existing=True)


async def get_service_order(db: AsyncSession, order_id: int) -> ServiceOrder:
    result = await db.execute(_order_query().where(ServiceOrder.id == order_id))
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError("Service order")
    return order


async def build_draft(
    db: AsyncSession,
    parts: Iterable[ServiceOrderPartIn],
    labor_cost=None,
    lock: bool = False,
) -> WorkOrderDraft:
    """
    Build a draft from requested part lines, checking stock line by line.

    With ``lock`` the part rows are selected ``FOR UPDATE`` so that the stock
    read here is the stock that gets decremented.
    """
    parts = list(parts)
    draft = WorkOrderDraft()
    draft.set_labor_cost(labor_cost)
    if not parts:
        return draft

    ids = {line.part_id for line in parts}
    query = select(Part).where(Part.id.in_(ids))
    if lock:
        query = query.with_for_update()
    result = await db.execute(query)
    stock = {part.id: part for part in result.scalars().all()}

    for line in parts:
        part = stock.get(line.part_id)
        if part is None:
            raise NotFoundError("Part")
        draft.add_part(part, line.quantity)
    return draft


async def preview_totals(
    db: AsyncSession,
    parts: Iterable[ServiceOrderPartIn],
    labor_cost=None,
) -> WorkOrderDraft:
    """Totals for the order form; nothing is saved and no stock is locked."""
    return await build_draft(db, parts, labor_cost)


async def resolve_service_type(db: AsyncSession, value: str) -> str:
    """
    Accept a built-in service code or label, an agenda service, or the name of
    a catalog service.
    """
    value = value.strip()
    if value in SERVICE_TYPES or value in SERVICE_TYPES.values() or value in APPOINTMENT_SERVICES:
        return value
    result = await db.execute(select(Service.id).where(Service.name == value))
    if result.scalar_one_or_none() is not None:
        return value
    raise BusinessRuleError(f"Unknown service type '{value}'")


async def _resolve_client(db: AsyncSession, payload: ServiceOrderCreate) -> Client:
    if payload.client_id is not None:
        client = await db.get(Client, payload.client_id)
        if client is None:
            raise NotFoundError("Client")
        return client

    client = Client(name=payload.client.name.strip(), phone=payload.client.phone.strip())
    db.add(client)
    await db.flush()
    logger.info(f"Client {client.id} created from service order form")
    return client


async def _resolve_vehicle(db: AsyncSession, payload: ServiceOrderCreate, client: Client) -> Vehicle:
    if payload.vehicle_id is not None:
        vehicle = await db.get(Vehicle, payload.vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle")
        if vehicle.client_id != client.id:
            raise BusinessRuleError("Vehicle does not belong to the selected client")
        return vehicle

    inline = payload.vehicle
    result = await db.execute(select(Vehicle).where(Vehicle.plate == inline.plate))
    vehicle = result.scalar_one_or_none()
    if vehicle is not None:
        if vehicle.client_id != client.id:
            raise ConflictError(f"Plate {inline.plate} is registered to another client")
        return vehicle

    vehicle = Vehicle(client_id=client.id, model=inline.model, plate=inline.plate, year=inline.year)
    db.add(vehicle)
    await db.flush()
    logger.info(f"Vehicle {vehicle.plate} created from service order form")
    return vehicle


async def _next_number(db: AsyncSession) -> int:
    current = await db.scalar(select(func.max(ServiceOrder.number)))
    return (current or 0) + 1


async def _commit_numbered(
    db: AsyncSession,
    build: Callable[[], Awaitable[ServiceOrder]],
) -> ServiceOrder:
    """
    Run ``build`` and commit, starting over when a concurrent order took the
    same number first.
    """
    for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
        try:
            order = await build()
            await db.commit()
            return order
        except IntegrityError:
            await db.rollback()
            if attempt == ORDER_NUMBER_ATTEMPTS:
                raise ConflictError("Could not assign a service order number, try again")
            logger.warning(f"Service order number taken, retrying (attempt {attempt})")


async def _persist_order(
    db: AsyncSession,
    client: Client,
    vehicle: Vehicle,
    service_type: str,
    description: Optional[str],
    draft: WorkOrderDraft,
) -> ServiceOrder:
    order = ServiceOrder(
        number=await _next_number(db),
        client_id=client.id,
        vehicle_id=vehicle.id,
        service_type=service_type,
        description=description,
        labor_cost=draft.labor_cost,
        parts_cost=draft.parts_cost,
        total_cost=draft.total_cost,
        status=ServiceOrderStatus.OPEN,
    )
    db.add(order)
    await db.flush()

    for line in draft.lines:
        db.add(ServiceOrderPart(
            service_order_id=order.id,
            part_id=line.part_id,
            quantity=line.quantity,
            price=line.price,
            subtotal=line.subtotal,
        ))

    if draft.lines:
        result = await db.execute(select(Part).where(Part.id.in_(draft.quantities().keys())))
        stock = {part.id: part for part in result.scalars().all()}
        for part_id, quantity in draft.quantities().items():
            part = stock[part_id]
            part.quantity -= quantity
            logger.info(f"Stock of part {part.code} reduced by {quantity} for OS #{order.number}")

    return order


async def create_service_order(db: AsyncSession, payload: ServiceOrderCreate) -> ServiceOrder:
    """
    Create a service order, taking its parts out of stock.

    With ``payload.finalize`` the order is completed right away.
    """
    async def build() -> ServiceOrder:
        client = await _resolve_client(db, payload)
        vehicle = await _resolve_vehicle(db, payload, client)
        service_type = await resolve_service_type(db, payload.service_type)
        draft = await build_draft(db, payload.parts, payload.labor_cost, lock=True)

        order = await _persist_order(db, client, vehicle, service_type, payload.description, draft)
        if payload.finalize:
            await _complete(db, order)
        return order

    order = await _commit_numbered(db, build)
    logger.info(f"Service order #{order.number} created, total {order.total_cost}")
    return await get_service_order(db, order.id)


async def _complete(db: AsyncSession, order: ServiceOrder) -> None:
    order.status = ServiceOrderStatus.COMPLETED
    order.completed_at = datetime.now(timezone.utc)
    if D(order.total_cost) == ZERO:
        logger.info(f"OS #{order.number} completed with no charge, no revenue recorded")
        return
    label = SERVICE_TYPES.get(order.service_type, order.service_type)
    db.add(FinancialTransaction(
        type=TransactionType.INCOME,
        category=SERVICE_REVENUE_CATEGORY,
        description=f"OS #{order.number} - {label}",
        amount=D(order.total_cost),
        date=date.today(),
        service_order_id=order.id,
    ))


async def _restock(db: AsyncSession, order: ServiceOrder) -> None:
    result = await db.execute(
        select(ServiceOrderPart).where(ServiceOrderPart.service_order_id == order.id)
    )
    for line in result.scalars().all():
        part = await db.get(Part, line.part_id)
        if part is not None:
            part.quantity += line.quantity
            logger.info(f"Stock of part {part.code} restored by {line.quantity} from OS #{order.number}")


async def change_status(db: AsyncSession, order_id: int, target: ServiceOrderStatus) -> ServiceOrder:
    order = await get_service_order(db, order_id)
    if target not in ALLOWED_TRANSITIONS[order.status]:
        raise InvalidTransitionError(order.status.value, target.value)

    if target == ServiceOrderStatus.COMPLETED:
        await _complete(db, order)
    elif target == ServiceOrderStatus.CANCELLED:
        await _restock(db, order)
        order.status = target
    else:
        order.status = target

    await db.commit()
    logger.info(f"Service order #{order.number} moved to {target.value}")
    return await get_service_order(db, order_id)


async def update_service_order(
    db: AsyncSession,
    order_id: int,
    description: Optional[str] = None,
    labor_cost: Optional[Decimal] = None,
) -> ServiceOrder:
    order = await get_service_order(db, order_id)
    if order.status not in (ServiceOrderStatus.OPEN, ServiceOrderStatus.IN_PROGRESS):
        raise BusinessRuleError("Only open or in-progress service orders can be edited")

    if description is not None:
        order.description = description
    if labor_cost is not None:
        order.labor_cost = D(labor_cost)
        order.total_cost = D(D(order.parts_cost) + order.labor_cost)

    await db.commit()
    return await get_service_order(db, order_id)


async def delete_service_order(db: AsyncSession, order_id: int) -> None:
    order = await get_service_order(db, order_id)
    if order.status not in DELETABLE_STATUSES:
        raise BusinessRuleError("Only open or cancelled service orders can be deleted")

    if order.status == ServiceOrderStatus.OPEN:
        await _restock(db, order)

    await db.delete(order)
    await db.commit()
    logger.info(f"Service order #{order.number} deleted")


async def convert_appointment(
    db: AsyncSession,
    appointment_id: int,
    labor_cost: Optional[Decimal] = None,
) -> ServiceOrder:
    """
    Open a service order for an appointment's client, vehicle and service.

    Without an explicit labor cost, the catalog price of the service is used.
    """
    async def build() -> ServiceOrder:
        appointment = await db.get(Appointment, appointment_id, populate_existing=True)
        if appointment is None:
            raise NotFoundError("Appointment")
        if appointment.status != AppointmentStatus.SCHEDULED:
            raise BusinessRuleError(f"Appointment is already {appointment.status.value}")

        price = labor_cost
        if price is None:
            result = await db.execute(
                select(Service.default_price).where(Service.name == appointment.service_type)
            )
            price = result.scalar_one_or_none()

        client = await db.get(Client, appointment.client_id)
        vehicle = await db.get(Vehicle, appointment.vehicle_id)
        draft = WorkOrderDraft()
        draft.set_labor_cost(price)

        order = await _persist_order(
            db, client, vehicle, appointment.service_type, appointment.description, draft
        )
        appointment.status = AppointmentStatus.CONVERTED
        return order

    order = await _commit_numbered(db, build)
    logger.info(f"Appointment {appointment_id} converted into OS #{order.number}")
    return await get_service_order(db, order.id)
