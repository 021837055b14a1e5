"""
Authentication routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from oficina.database import get_db
from oficina.logging_config import get_logger
from oficina.models.user import User
from oficina.schemas.user import LoginRequest, Token, User as UserSchema
from oficina.auth import authenticate_user, create_access_token, get_current_active_user

router = APIRouter(prefix="/auth", tags=["auth"])
logger = get_logger(__name__)


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Exchange username and password for a bearer token.
    """
    user = await authenticate_user(db, credentials.username, credentials.password)
    if not user:
        logger.warning(f"Failed login for '{credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    return Token(access_token=create_access_token(user.username), token_type="bearer")


@router.get("/me", response_model=UserSchema)
async def read_current_user(current_user: User = Depends(get_current_active_user)):
    """
    Get the logged-in user.
    """
    return current_user
