"""User management endpoints.

Administration is manager only. The sales and assignable lists feed the
lead assignment pickers and are open to any signed-in user.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user, require_manager
from app.models.enums import UserRole
from app.models.lead import Lead
from app.models.user import User
from app.schemas.auth import MessageResponse, UserCreate, UserCreatedResponse, UserOut, UserSummary, UserUpdate
from app.services.audit_service import log_event
from app.services.auth import get_user_by_email, hash_password

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[UserOut])
async def list_users(
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).order_by(User.name))
    return result.scalars().all()


@router.get("/sales", response_model=List[UserSummary])
async def list_sales_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(User).where(User.role == UserRole.SALES, User.is_active.is_(True)).order_by(User.name)
    )
    return result.scalars().all()


@router.get("/assignable", response_model=List[UserSummary])
async def list_assignable_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Active sales staff and managers, managers first."""
    managers_first = case((User.role == UserRole.MANAGER, 0), else_=1)
    result = await db.execute(
        select(User)
        .where(User.role.in_([UserRole.SALES, UserRole.MANAGER]), User.is_active.is_(True))
        .order_by(managers_first, User.name)
    )
    return result.scalars().all()


@router.post("/", response_model=UserCreatedResponse, status_code=201)
async def create_user(
    user_in: UserCreate,
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    if await get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=422, detail="The email has already been taken.")

    fields = user_in.model_dump(exclude={"password"})
    user = User(**fields, hashed_password=hash_password(user_in.password), is_active=True)
    db.add(user)
    await db.commit()
    await db.refresh(user)

    await log_event(db, "user_created", {"user_id": user.id, "role": user.role.value}, actor_id=current_user.id)
    logger.info("User %d (%s) created by %d", user.id, user.role.value, current_user.id)

    return UserCreatedResponse(message="User created successfully.", user=UserOut.model_validate(user))


@router.patch("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: int,
    update: UserUpdate,
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    """Update a user's role, status or commission settings.

    A manager cannot change their own role.
    """
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    old_role = user.role
    role_changed = changes.get("role") is not None and changes["role"] != old_role

    if role_changed and user.id == current_user.id:
        raise HTTPException(status_code=403, detail="You cannot change your own role.")

    for key, value in changes.items():
        setattr(user, key, value)

    await db.commit()
    await db.refresh(user)

    if role_changed:
        await log_event(
            db,
            "user_role_changed",
            {"user_id": user.id, "from": old_role.value, "to": user.role.value},
            actor_id=current_user.id,
        )
        logger.info("User %d role changed %s -> %s by %d", user.id, old_role.value, user.role.value, current_user.id)

    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user who has no leads assigned. Their category limits go with them."""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if user.id == current_user.id:
        raise HTTPException(status_code=422, detail="You cannot delete your own account.")

    assigned = await db.scalar(select(func.count(Lead.id)).where(Lead.assigned_to == user.id))
    if assigned:
        raise HTTPException(
            status_code=422,
            detail=f"Cannot delete user. User has {assigned} assigned lead(s). Please reassign them first.",
        )

    name = user.name
    await db.delete(user)
    await db.commit()

    await log_event(db, "user_deleted", {"user_id": user_id, "name": name}, actor_id=current_user.id)
    logger.info("User %d deleted by %d", user_id, current_user.id)

    return {"message": f"User '{name}' deleted successfully."}
