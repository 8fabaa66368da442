"""Pydantic schemas for per-user category limits."""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from app.models.enums import LeadCategory


class CategoryLimitsOut(BaseModel):
    """Every category is present; categories with no stored row read as 0."""
    user_id: int
    limits: Dict[LeadCategory, int]


class CategoryLimitsUpdate(BaseModel):
    """Null values leave that category's stored limit unchanged."""
    user_id: int
    limits: Dict[LeadCategory, Optional[int]] = Field(..., min_length=1)

    @field_validator("limits")
    @classmethod
    def non_negative(cls, v):
        for category, value in v.items():
            if value is not None and value < 0:
                raise ValueError(f"Limit for {category.value} must be 0 or more")
        return v


class CategoryLimitsUpdated(CategoryLimitsOut):
    message: str
    user_name: str


class UserCategoryLimits(CategoryLimitsOut):
    name: str
    role: str


class UserCategoryLimitsList(BaseModel):
    users: List[UserCategoryLimits]
