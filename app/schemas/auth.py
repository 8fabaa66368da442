"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from app.models.enums import UserRole


class UserLogin(BaseModel):
    """Request schema for user login."""
    email: EmailStr
    password: str


class Token(BaseModel):
    """Response schema for login: returns JWT token."""
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: UserRole
    name: str
    email: str


class UserOut(BaseModel):
    """Response schema for user info."""
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    target_price: Optional[Decimal] = None
    commission: Decimal
    bonus_commission: Decimal
    commission_earned: Decimal
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    """Manager-only user update."""
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    target_price: Optional[Decimal] = None
    commission: Optional[Decimal] = None
    bonus_commission: Optional[Decimal] = None


class MessageResponse(BaseModel):
    """Generic success message response."""
    message: str


class UserCreate(BaseModel):
    """Manager-only user creation."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    target_price: Decimal = Field(Decimal("50000"), ge=0)
    commission: Decimal = Field(Decimal("0"), ge=0, le=100)
    bonus_commission: Decimal = Field(Decimal("0"), ge=0, le=100)


class UserSummary(BaseModel):
    """Lightweight user entry for assignment pickers."""
    id: int
    name: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True


class UserCreatedResponse(BaseModel):
    message: str
    user: UserOut
