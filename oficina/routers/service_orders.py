"""
Service order (OS) routes: creation, history and status changes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import List, Literal, Optional

from oficina.constants import SERVICE_TYPES
from oficina.database import get_db
from oficina.models.client import Client
from oficina.models.service_order import ServiceOrder, ServiceOrderStatus
from oficina.models.vehicle import Vehicle
from oficina.models.user import User
from oficina.schemas.service import ServiceType
from oficina.schemas.service_order import (
    ServiceOrder as ServiceOrderSchema,
    ServiceOrderCreate,
    ServiceOrderDraft,
    ServiceOrderListItem,
    ServiceOrderPartLine,
    ServiceOrderPreview,
    ServiceOrderStatusUpdate,
    ServiceOrderUpdate,
)
from oficina.services import work_orders
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/service-orders", tags=["service-orders"])

SEARCH_COLUMNS = {
    "client": Client.name,
    "vehicle": Vehicle.model,
    "plate": Vehicle.plate,
}


@router.get("/", response_model=List[ServiceOrderListItem])
async def get_service_orders(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    field: Literal["client", "vehicle", "plate"] = "client",
    status_filter: Optional[ServiceOrderStatus] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the service history, newest first.

    ``search`` matches the client name, vehicle model or plate depending on
    ``field``.
    """
    query = (
        select(ServiceOrder)
        .join(Client, ServiceOrder.client_id == Client.id)
        .join(Vehicle, ServiceOrder.vehicle_id == Vehicle.id)
        .options(selectinload(ServiceOrder.client), selectinload(ServiceOrder.vehicle))
    )
    if search:
        query = query.where(SEARCH_COLUMNS[field].ilike(f"%{search.strip()}%"))
    if status_filter:
        query = query.where(ServiceOrder.status == status_filter)

    query = query.order_by(ServiceOrder.created_at.desc(), ServiceOrder.number.desc())
    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/types", response_model=List[ServiceType])
async def get_service_types(current_user: User = Depends(get_current_active_user)):
    """
    Get the built-in service types.
    """
    return [ServiceType(code=code, label=label) for code, label in SERVICE_TYPES.items()]


@router.post("/preview", response_model=ServiceOrderPreview)
async def preview_service_order(
    draft_in: ServiceOrderDraft,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Compute parts and order totals for a draft without saving it.
    """
    draft = await work_orders.preview_totals(db, draft_in.parts, draft_in.labor_cost)
    return ServiceOrderPreview(
        parts=[
            ServiceOrderPartLine(
                part_id=line.part_id,
                name=line.name,
                quantity=line.quantity,
                price=line.price,
                subtotal=line.subtotal,
            )
            for line in draft.lines
        ],
        parts_cost=draft.parts_cost,
        labor_cost=draft.labor_cost,
        total_cost=draft.total_cost,
    )


@router.get("/{order_id}", response_model=ServiceOrderSchema)
async def get_service_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a service order with its parts, client and vehicle.
    """
    return await work_orders.get_service_order(db, order_id)


@router.post("/", response_model=ServiceOrderSchema, status_code=status.HTTP_201_CREATED)
async def create_service_order(
    order: ServiceOrderCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a service order. Parts are taken out of stock; with ``finalize``
    the order is completed and its revenue recorded.
    """
    return await work_orders.create_service_order(db, order)


@router.put("/{order_id}", response_model=ServiceOrderSchema)
async def update_service_order(
    order_id: int,
    order_update: ServiceOrderUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update the description or labor cost of an unfinished order.
    """
    return await work_orders.update_service_order(
        db, order_id, order_update.description, order_update.labor_cost
    )


@router.post("/{order_id}/status", response_model=ServiceOrderSchema)
async def change_service_order_status(
    order_id: int,
    status_update: ServiceOrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Move a service order to another status.
    """
    return await work_orders.change_status(db, order_id, status_update.status)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete an open or cancelled service order.
    """
    await work_orders.delete_service_order(db, order_id)
    return None
