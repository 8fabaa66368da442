"""Per-user lead category limits.

Limits are stored and managed here only; lead assignment does not check them.
"""

from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.category_limit import CategoryLimit
from app.models.enums import LeadCategory


def empty_limits() -> Dict[LeadCategory, int]:
    return {category: 0 for category in LeadCategory}


async def get_limits(db: AsyncSession, user_ids: Iterable[int]) -> Dict[int, Dict[LeadCategory, int]]:
    """Full category map for each user, zero-filled where no row exists."""
    user_ids = list(user_ids)
    limits = {user_id: empty_limits() for user_id in user_ids}
    if not user_ids:
        return limits

    result = await db.execute(select(CategoryLimit).where(CategoryLimit.user_id.in_(user_ids)))
    for row in result.scalars().all():
        limits[row.user_id][row.category] = row.limit
    return limits


async def set_limits(db: AsyncSession, user_id: int, limits: Dict[LeadCategory, int]) -> None:
    """Upsert one row per given category. Other categories are left alone."""
    result = await db.execute(select(CategoryLimit).where(CategoryLimit.user_id == user_id))
    existing = {row.category: row for row in result.scalars().all()}

    for category, value in limits.items():
        row = existing.get(category)
        if row is None:
            db.add(CategoryLimit(user_id=user_id, category=category, limit=value))
        else:
            row.limit = value

    await db.commit()
