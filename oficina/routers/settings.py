"""
Settings routes: shop profile and user management.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import or_, select
from typing import List

from oficina.database import get_db
from oficina.errors import BusinessRuleError, ConflictError, NotFoundError
from oficina.logging_config import get_logger
from oficina.models.shop import ShopProfile
from oficina.models.user import User
from oficina.schemas.shop import ShopProfile as ShopProfileSchema, ShopProfileUpdate
from oficina.schemas.user import User as UserSchema, UserCreate, UserUpdate
from oficina.auth import get_current_active_user, hash_password

router = APIRouter(prefix="/settings", tags=["settings"])
logger = get_logger(__name__)

SHOP_PROFILE_ID = 1


@router.get("/shop", response_model=ShopProfileSchema)
async def get_shop_profile(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get the shop's company data.
    """
    profile = await db.get(ShopProfile, SHOP_PROFILE_ID)
    if not profile:
        raise NotFoundError("Shop profile")
    return profile


@router.put("/shop", response_model=ShopProfileSchema)
async def update_shop_profile(
    profile_update: ShopProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create or replace the shop's company data.
    """
    profile = await db.get(ShopProfile, SHOP_PROFILE_ID)
    if not profile:
        profile = ShopProfile(id=SHOP_PROFILE_ID)
        db.add(profile)

    for field, value in profile_update.model_dump().items():
        setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)

    logger.info("Shop profile saved")
    return profile


@router.get("/users", response_model=List[UserSchema])
async def get_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get all users.
    """
    result = await db.execute(select(User).order_by(User.name))
    return result.scalars().all()


@router.post("/users", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def create_user(
    user: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Create a new user.
    """
    result = await db.execute(
        select(User).where(or_(User.username == user.username, User.email == user.email))
    )
    if result.scalars().first():
        raise ConflictError("Username or email already registered")

    data = user.model_dump(exclude={"password", "confirm_password"})
    db_user = User(**data, hashed_password=hash_password(user.password))
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)

    logger.info(f"User '{db_user.username}' created by '{current_user.username}'")
    return db_user


@router.put("/users/{user_id}", response_model=UserSchema)
async def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Update a user. A new password must be confirmed.
    """
    db_user = await db.get(User, user_id)
    if not db_user:
        raise NotFoundError("User")

    update_data = user_update.model_dump(exclude_unset=True, exclude={"password", "confirm_password"})
    if "email" in update_data:
        result = await db.execute(
            select(User.id).where(User.email == update_data["email"], User.id != user_id)
        )
        if result.first():
            raise ConflictError("Email already registered")

    for field, value in update_data.items():
        setattr(db_user, field, value)
    if user_update.password is not None:
        db_user.hashed_password = hash_password(user_update.password)

    await db.commit()
    await db.refresh(db_user)

    return db_user


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Delete a user. Users cannot delete themselves.
    """
    if user_id == current_user.id:
        raise BusinessRuleError("You cannot delete your own user")

    db_user = await db.get(User, user_id)
    if not db_user:
        raise NotFoundError("User")

    await db.delete(db_user)
    await db.commit()
    logger.info(f"User '{db_user.username}' deleted by '{current_user.username}'")

    return None
