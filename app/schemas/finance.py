"""Pydantic schemas for finance endpoints."""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.lead import LeadOut


class RejectLead(BaseModel):
    rejection_reason: str = Field(..., min_length=1, max_length=1000)


class FinanceLeadResponse(BaseModel):
    message: str
    lead: LeadOut
    commission_amount: Optional[Decimal] = None


class FinanceLeadList(BaseModel):
    leads: List[LeadOut]
    total: int
    limit: int
    offset: int


class FinanceStatistics(BaseModel):
    pending_approvals: int
    approved_leads: int
    rejected_leads: int
    pending_commission_payment: int
    total_approved_value: Decimal
    total_commission_paid: Decimal = Field(description="Profit on approved leads whose commission is paid")
    total_pending_commission: Decimal = Field(description="Profit on approved leads awaiting commission payment")
