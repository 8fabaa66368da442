"""Per-user lead category limits.

- GET /api/v1/category-limits/        → Limits for a user (self unless manager)
- PUT /api/v1/category-limits/        → Set limits for a user (manager only)
- GET /api/v1/category-limits/users   → Every active user with limits (manager only)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user, require_manager
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.category_limit import (
    CategoryLimitsOut,
    CategoryLimitsUpdate,
    CategoryLimitsUpdated,
    UserCategoryLimits,
    UserCategoryLimitsList,
)
from app.services.audit_service import log_event
from app.services.category_limits import get_limits, set_limits

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=CategoryLimitsOut)
async def get_category_limits(
    user_id: Optional[int] = Query(None, description="User to inspect; defaults to the caller"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    target_id = user_id if user_id is not None else current_user.id
    if target_id != current_user.id and current_user.role != UserRole.MANAGER:
        raise HTTPException(status_code=403, detail="Unauthorized to view other user category limits.")

    limits = await get_limits(db, [target_id])
    return CategoryLimitsOut(user_id=target_id, limits=limits[target_id])


@router.put("/", response_model=CategoryLimitsUpdated)
async def update_category_limits(
    payload: CategoryLimitsUpdate,
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, payload.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")

    changes = {category: value for category, value in payload.limits.items() if value is not None}
    await set_limits(db, user.id, changes)

    await log_event(
        db,
        "category_limits_updated",
        {"user_id": user.id, "limits": {category.value: value for category, value in changes.items()}},
        actor_id=current_user.id,
    )

    limits = await get_limits(db, [user.id])
    return CategoryLimitsUpdated(
        message="Category limits updated successfully.",
        user_id=user.id,
        user_name=user.name,
        limits=limits[user.id],
    )


@router.get("/users", response_model=UserCategoryLimitsList)
async def list_user_category_limits(
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.is_active.is_(True)).order_by(User.role, User.name))
    users = result.scalars().all()
    limits = await get_limits(db, [user.id for user in users])

    return UserCategoryLimitsList(users=[
        UserCategoryLimits(user_id=user.id, name=user.name, role=user.role.value, limits=limits[user.id])
        for user in users
    ])
