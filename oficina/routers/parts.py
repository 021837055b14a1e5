"""
Parts inventory routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, or_, select
from typing import List, Literal, Optional

from oficina.constants import ALL_CATEGORIES, PART_CATEGORIES
from oficina.database import get_db
from oficina.errors import BusinessRuleError, ConflictError, NotFoundError
from oficina.logging_config import get_logger
from oficina.models.part import Part
from oficina.models.service_order import ServiceOrderPart
from oficina.models.user import User
from oficina.schemas.part import (
    Part as PartSchema,
    PartCreate,
    PartUpdate,
    PartsSummary,
    StockAdjustment,
)
from oficina.auth import get_current_active_user

router = APIRouter(prefix="/parts", tags=["parts"])
logger = get_logger(__name__)

SORT_COLUMNS = {
    "name": Part.name,
    "code": Part.code,
    "quantity": Part.quantity,
    "price": Part.price,
}

LOW_STOCK = Part.quantity <= func.coalesce(Part.min_quantity, 0)


async def _get_part_or_404(db: AsyncSession, part_id: int) -> Part:
    part = await db.get(Part, part_id)
    if not part:
        raise NotFoundError("Part")
    return part


async def _ensure_code_free(db: AsyncSession, code: str, part_id: Optional[int] = None):
    query = select(Part.id).where(func.lower(Part.code) == code.lower())
    if part_id is not None:
        query = query.where(Part.id != part_id)
    if (await db.execute(query)).first():
        raise ConflictError(f"Part code '{code}' already registered")


@router.get("/", response_model=List[PartSchema])
async def get_parts(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    category: str = ALL_CATEGORIES,
    sort: Literal["name", "code", "quantity", "price"] = "name",
    direction: Literal["asc", "desc"] = "asc",
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get parts filtered by name/code search and category, sorted by a column.
    """
    query = select(Part)
    if search:
        term = f"%{search.strip().lower()}%"
        query = query.where(or_(func.lower(Part.name).like(term), func.lower(Part.code).like(term)))
    if category != ALL_CATEGORIES:
        query = query.where(Part.category == category)

    column = SORT_COLUMNS[sort]
    query = query.order_by(column.desc() if direction == "desc" else column.asc(), Part.id)

    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


@router.get("/categories", response_model=List[str])
async def get_categories(current_user: User = Depends(get_current_active_user)):
    """
    Get the part categories.
    """
    return PART_CATEGORIES


@router.get("/summary", response_model=PartsSummary)
async def get_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get stock totals for the inventory cards.
    """
    total_items, part_count = (
        await db.execute(select(func.coalesce(func.sum(Part.quantity), 0), func.count(Part.id)))
    ).one()
    low_stock_count = await db.scalar(select(func.count(Part.id)).where(LOW_STOCK))
    return PartsSummary(
        total_items=total_items,
        part_count=part_count,
        low_stock_count=low_stock_count,
    )


@router.get("/low-stock", response_model=List[PartSchema])
async def get_low_stock(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the parts at or below their minimum stock.
    """
    result = await db.execute(select(Part).where(LOW_STOCK).order_by(Part.quantity, Part.name))
    return result.scalars().all()


@router.get("/{part_id}", response_model=PartSchema)
async def get_part(
    part_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a specific part by ID.
    """
    return await _get_part_or_404(db, part_id)


@router.post("/", response_model=PartSchema, status_code=status.HTTP_201_CREATED)
async def create_part(
    part: PartCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a new part.
    """
    await _ensure_code_free(db, part.code)

    db_part = Part(**part.model_dump())
    db.add(db_part)
    await db.commit()
    await db.refresh(db_part)

    logger.info(f"Part {db_part.code} created with {db_part.quantity} in stock")
    return db_part


@router.put("/{part_id}", response_model=PartSchema)
async def update_part(
    part_id: int,
    part_update: PartUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a part.
    """
    db_part = await _get_part_or_404(db, part_id)

    # Update only provided fields
    update_data = part_update.model_dump(exclude_unset=True)
    if "code" in update_data:
        await _ensure_code_free(db, update_data["code"], part_id)

    for field, value in update_data.items():
        setattr(db_part, field, value)

    await db.commit()
    await db.refresh(db_part)

    return db_part


@router.post("/{part_id}/stock", response_model=PartSchema)
async def adjust_stock(
    part_id: int,
    adjustment: StockAdjustment,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Add or remove units from a part's stock.
    """
    result = await db.execute(select(Part).where(Part.id == part_id).with_for_update())
    db_part = result.scalar_one_or_none()
    if not db_part:
        raise NotFoundError("Part")

    new_quantity = db_part.quantity + adjustment.delta
    if new_quantity < 0:
        raise BusinessRuleError(
            f"Stock cannot go below zero: {db_part.quantity} in stock, delta {adjustment.delta}"
        )
    db_part.quantity = new_quantity
    await db.commit()
    await db.refresh(db_part)

    logger.info(
        f"Stock of part {db_part.code} adjusted by {adjustment.delta} "
        f"({adjustment.reason or 'no reason given'})"
    )
    return db_part


@router.delete("/{part_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_part(
    part_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a part that was never used on a service order.
    """
    db_part = await _get_part_or_404(db, part_id)

    used = await db.scalar(
        select(func.count()).select_from(ServiceOrderPart).where(ServiceOrderPart.part_id == part_id)
    )
    if used:
        raise ConflictError("Part is used on service orders and cannot be deleted")

    await db.delete(db_part)
    await db.commit()
    logger.info(f"Part {db_part.code} deleted")

    return None
