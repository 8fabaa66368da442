"""Pydantic schemas for customer records."""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from app.models.enums import CustomerStatus


class CustomerCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    status: CustomerStatus = CustomerStatus.LEAD
    notes: Optional[str] = None


class CustomerUpdate(BaseModel):
    """Partial update; only fields that are sent are changed."""
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    status: Optional[CustomerStatus] = None
    notes: Optional[str] = None

    @field_validator("full_name", "status", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("This field cannot be null")
        return v


class CustomerOut(BaseModel):
    id: int
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: CustomerStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerList(BaseModel):
    customers: List[CustomerOut]
    total: int
    limit: int
    offset: int


class CustomerResponse(BaseModel):
    message: str
    customer: CustomerOut
