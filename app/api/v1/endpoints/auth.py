"""Authentication endpoints."""

import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import UserLogin, Token, UserOut
from app.services.auth import authenticate_user, create_user_token

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    user = await authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.warning("Failed login attempt for %s", credentials.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is disabled")

    user.last_login_at = datetime.utcnow()
    await db.commit()

    logger.info("User logged in: %s (%s)", user.email, user.role.value)

    return Token(
        access_token=create_user_token(user),
        user_id=user.id,
        role=user.role,
        name=user.name,
        email=user.email,
    )


@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user."""
    return current_user
