"""
Client routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload
from typing import List, Optional

from oficina.database import get_db
from oficina.errors import ConflictError, NotFoundError
from oficina.logging_config import get_logger
from oficina.models.client import Client
from oficina.models.service_order import ServiceOrder
from oficina.models.user import User
from oficina.schemas.client import Client as ClientSchema, ClientCreate, ClientUpdate
from oficina.schemas.vehicle import Vehicle as VehicleSchema
from oficina.models.vehicle import Vehicle
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/clients", tags=["clients"])
logger = get_logger(__name__)


async def _get_client_or_404(db: AsyncSession, client_id: int) -> Client:
    client = await db.get(Client, client_id)
    if not client:
        raise NotFoundError("Client")
    return client


@router.get("/", response_model=List[ClientSchema])
async def get_clients(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get all clients with pagination, optionally searching by name.
    """
    query = select(Client).order_by(Client.name)
    if search:
        query = query.where(Client.name.ilike(f"%{search.strip()}%"))

    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/{client_id}", response_model=ClientSchema)
async def get_client(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific client by ID.
    """
    return await _get_client_or_404(db, client_id)


@router.get("/{client_id}/vehicles", response_model=List[VehicleSchema])
async def get_client_vehicles(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the vehicles of a client.
    """
    await _get_client_or_404(db, client_id)
    result = await db.execute(
        select(Vehicle).where(Vehicle.client_id == client_id).order_by(Vehicle.model)
    )
    return result.scalars().all()


@router.post("/", response_model=ClientSchema, status_code=status.HTTP_201_CREATED)
async def create_client(
    client: ClientCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a new client.
    """
    db_client = Client(**client.model_dump())
    db.add(db_client)
    await db.commit()
    await db.refresh(db_client)

    logger.info(f"Client {db_client.id} created")
    return db_client


@router.put("/{client_id}", response_model=ClientSchema)
async def update_client(
    client_id: int,
    client_update: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a client.
    """
    db_client = await _get_client_or_404(db, client_id)

    # Update only provided fields
    update_data = client_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_client, field, value)

    await db.commit()
    await db.refresh(db_client)

    return db_client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a client together with their vehicles and appointments.

    Clients with service orders are kept for the service history.
    """
    result = await db.execute(
        select(Client)
        .options(selectinload(Client.vehicles), selectinload(Client.appointments))
        .where(Client.id == client_id)
    )
    db_client = result.scalar_one_or_none()
    if not db_client:
        raise NotFoundError("Client")

    orders = await db.scalar(
        select(func.count()).select_from(ServiceOrder).where(ServiceOrder.client_id == client_id)
    )
    if orders:
        raise ConflictError("Client has service orders and cannot be deleted")

    await db.delete(db_client)
    await db.commit()
    logger.info(f"Client {client_id} deleted")

    return None
