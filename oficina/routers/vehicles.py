"""
Vehicle routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload
from typing import List, Optional

from oficina.database import get_db
from oficina.errors import ConflictError, NotFoundError
from oficina.logging_config import get_logger
from oficina.models.client import Client
from oficina.models.service_order import ServiceOrder
from oficina.models.vehicle import Vehicle
from oficina.models.user import User
from oficina.schemas.vehicle import Vehicle as VehicleSchema, VehicleCreate, VehicleUpdate
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/vehicles", tags=["vehicles"])
logger = get_logger(__name__)


async def _ensure_plate_free(db: AsyncSession, plate: str, vehicle_id: Optional[int] = None):
    query = select(Vehicle).where(Vehicle.plate == plate)
    if vehicle_id is not None:
        query = query.where(Vehicle.id != vehicle_id)
    result = await db.execute(query)
    if result.scalar_one_or_none():
        raise ConflictError("Plate already registered")


async def _ensure_client(db: AsyncSession, client_id: int):
    if not await db.get(Client, client_id):
        raise NotFoundError("Client")


@router.get("/", response_model=List[VehicleSchema])
async def get_vehicles(
    skip: int = 0,
    limit: int = 100,
    client_id: Optional[int] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get all vehicles with pagination, filtered by client or plate/model search.
    """
    query = select(Vehicle).order_by(Vehicle.plate)
    if client_id is not None:
        query = query.where(Vehicle.client_id == client_id)
    if search:
        term = f"%{search.strip()}%"
        query = query.where(or_(Vehicle.plate.ilike(term), Vehicle.model.ilike(term)))

    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/{vehicle_id}", response_model=VehicleSchema)
async def get_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific vehicle by ID.
    """
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle")
    return vehicle


@router.post("/", response_model=VehicleSchema, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a new vehicle.
    """
    await _ensure_client(db, vehicle.client_id)
    await _ensure_plate_free(db, vehicle.plate)

    db_vehicle = Vehicle(**vehicle.model_dump())
    db.add(db_vehicle)
    await db.commit()
    await db.refresh(db_vehicle)

    logger.info(f"Vehicle {db_vehicle.plate} created for client {db_vehicle.client_id}")
    return db_vehicle


@router.put("/{vehicle_id}", response_model=VehicleSchema)
async def update_vehicle(
    vehicle_id: int,
    vehicle_update: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a vehicle.
    """
    db_vehicle = await db.get(Vehicle, vehicle_id)
    if not db_vehicle:
        raise NotFoundError("Vehicle")

    # Update only provided fields
    update_data = vehicle_update.model_dump(exclude_unset=True)
    if "plate" in update_data:
        await _ensure_plate_free(db, update_data["plate"], vehicle_id)
    if "client_id" in update_data:
        await _ensure_client(db, update_data["client_id"])

    for field, value in update_data.items():
        setattr(db_vehicle, field, value)

    await db.commit()
    await db.refresh(db_vehicle)

    return db_vehicle


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a vehicle that has no service orders.
    """
    result = await db.execute(
        select(Vehicle).options(selectinload(Vehicle.appointments)).where(Vehicle.id == vehicle_id)
    )
    db_vehicle = result.scalar_one_or_none()
    if not db_vehicle:
        raise NotFoundError("Vehicle")

    orders = await db.scalar(
        select(func.count()).select_from(ServiceOrder).where(ServiceOrder.vehicle_id == vehicle_id)
    )
    if orders:
        raise ConflictError("Vehicle has service orders and cannot be deleted")

    await db.delete(db_vehicle)
    await db.commit()

    return None
