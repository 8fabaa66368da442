"""Pydantic schemas for Leads."""

from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from app.models.enums import LeadCategory, LeadPriority, LeadStatus


class LeadBase(BaseModel):
    customer_id: Optional[int] = None
    priority: LeadPriority = LeadPriority.MEDIUM
    category: Optional[LeadCategory] = None
    source: Optional[str] = Field(None, max_length=100)
    car_company: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    trim: Optional[str] = Field(None, max_length=100)
    spec: Optional[str] = Field(None, max_length=100)
    model_year: Optional[int] = Field(None, ge=1900, le=2100)
    interior_colour: Optional[str] = None
    exterior_colour: Optional[str] = None
    gear_box: Optional[str] = None
    car_type: Optional[str] = None
    fuel_tank: Optional[str] = None
    steering_side: Optional[str] = None
    export_to: Optional[str] = None
    export_to_country: Optional[str] = None
    quantity: int = Field(1, ge=1)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None
    not_converted_reason: Optional[str] = None
    assigned_to: Optional[int] = None


class LeadCreate(LeadBase):
    """Schema for creating a lead."""
    lead_name: str = Field(..., min_length=1, max_length=255)
    status: LeadStatus = LeadStatus.NEW


class LeadUpdate(BaseModel):
    """Partial update; only fields that are sent are changed."""
    lead_name: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[LeadStatus] = None
    priority: Optional[LeadPriority] = None
    category: Optional[LeadCategory] = None
    customer_id: Optional[int] = None
    source: Optional[str] = None
    car_company: Optional[str] = None
    model: Optional[str] = None
    trim: Optional[str] = None
    spec: Optional[str] = None
    model_year: Optional[int] = Field(None, ge=1900, le=2100)
    interior_colour: Optional[str] = None
    exterior_colour: Optional[str] = None
    gear_box: Optional[str] = None
    car_type: Optional[str] = None
    fuel_tank: Optional[str] = None
    steering_side: Optional[str] = None
    export_to: Optional[str] = None
    export_to_country: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=1)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    cost_price: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None
    not_converted_reason: Optional[str] = None
    assigned_to: Optional[int] = None

    @field_validator("lead_name", "status", "priority", "quantity", mode="before")
    @classmethod
    def reject_null(cls, v):
        # Omit the field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("This field cannot be null")
        return v


class LeadOut(LeadBase):
    """Schema for returning lead details."""
    id: int
    lead_name: str
    status: LeadStatus
    is_active: bool
    finance_approved: Optional[bool] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    commission_paid: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LeadList(BaseModel):
    leads: List[LeadOut]
    total: int
    limit: int
    offset: int


class LeadStatsOut(BaseModel):
    """Schema for lead statistics."""
    total: int
    active: int
    new: int
    converted: int
    not_converted: int
    high_priority: int
    medium_priority: int
    low_priority: int


class LeadBulkDelete(BaseModel):
    ids: List[int] = Field(..., min_length=1)


class LeadExport(BaseModel):
    """Flat rows for spreadsheet export, keyed by column title."""
    data: List[dict]
