"""
Service catalog routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional

from oficina.database import get_db
from oficina.errors import ConflictError, NotFoundError
from oficina.models.service import Service
from oficina.models.user import User
from oficina.schemas.service import Service as ServiceSchema, ServiceCreate, ServiceUpdate
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/services", tags=["services"])


async def _ensure_name_free(db: AsyncSession, name: str, service_id: Optional[int] = None):
    query = select(Service.id).where(Service.name == name)
    if service_id is not None:
        query = query.where(Service.id != service_id)
    if (await db.execute(query)).first():
        raise ConflictError(f"Service '{name}' already registered")


@router.get("/", response_model=List[ServiceSchema])
async def get_services(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get catalog services by name, optionally matching a search term.
    """
    query = select(Service).order_by(Service.name)
    if search:
        query = query.where(Service.name.ilike(f"%{search.strip()}%"))

    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/{service_id}", response_model=ServiceSchema)
async def get_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific service by ID.
    """
    service = await db.get(Service, service_id)
    if not service:
        raise NotFoundError("Service")
    return service


@router.post("/", response_model=ServiceSchema, status_code=status.HTTP_201_CREATED)
async def create_service(
    service: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a new catalog service.
    """
    await _ensure_name_free(db, service.name)

    db_service = Service(**service.model_dump())
    db.add(db_service)
    await db.commit()
    await db.refresh(db_service)

    return db_service


@router.put("/{service_id}", response_model=ServiceSchema)
async def update_service(
    service_id: int,
    service_update: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a catalog service.
    """
    db_service = await db.get(Service, service_id)
    if not db_service:
        raise NotFoundError("Service")

    # Update only provided fields
    update_data = service_update.model_dump(exclude_unset=True)
    if "name" in update_data:
        await _ensure_name_free(db, update_data["name"], service_id)

    for field, value in update_data.items():
        setattr(db_service, field, value)

    await db.commit()
    await db.refresh(db_service)

    return db_service


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a catalog service.
    """
    db_service = await db.get(Service, service_id)
    if not db_service:
        raise NotFoundError("Service")

    await db.delete(db_service)
    await db.commit()

    return None
