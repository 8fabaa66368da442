"""Finance endpoints: approval of converted leads and commission tracking.

All routes are gated by the finance access policy (finance or manager role).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import require_finance_access
from app.models.enums import LeadStatus
from app.models.lead import Lead
from app.models.user import User
from app.schemas.finance import FinanceLeadList, FinanceLeadResponse, FinanceStatistics, RejectLead
from app.schemas.lead import LeadOut
from app.services import finance as finance_service
from app.services.leads import get_lead_or_404

router = APIRouter()
logger = logging.getLogger(__name__)


async def _list_converted(db: AsyncSession, conditions, order_by, limit: int, offset: int) -> FinanceLeadList:
    conditions = [Lead.status == LeadStatus.CONVERTED, *conditions]

    total_result = await db.execute(select(func.count(Lead.id)).where(*conditions))
    total = total_result.scalar() or 0

    result = await db.execute(
        select(Lead).where(*conditions).order_by(order_by, Lead.id.desc()).limit(limit).offset(offset)
    )
    leads = [LeadOut.model_validate(lead) for lead in result.scalars().all()]
    return FinanceLeadList(leads=leads, total=total, limit=limit, offset=offset)


@router.get("/pending", response_model=FinanceLeadList)
async def pending_approvals(
    assigned_to: Optional[int] = Query(None),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_finance_access),
    db: AsyncSession = Depends(get_db),
):
    """Converted leads awaiting a finance decision."""
    conditions = [Lead.finance_approved.is_(None)]
    if assigned_to is not None:
        conditions.append(Lead.assigned_to == assigned_to)
    return await _list_converted(db, conditions, Lead.updated_at.desc(), limit, offset)


@router.get("/approved", response_model=FinanceLeadList)
async def approved_leads(
    assigned_to: Optional[int] = Query(None),
    commission_paid: Optional[bool] = Query(None),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_finance_access),
    db: AsyncSession = Depends(get_db),
):
    conditions = [Lead.finance_approved.is_(True)]
    if assigned_to is not None:
        conditions.append(Lead.assigned_to == assigned_to)
    if commission_paid is not None:
        conditions.append(Lead.commission_paid.is_(commission_paid))
    return await _list_converted(db, conditions, Lead.approved_at.desc(), limit, offset)


@router.get("/rejected", response_model=FinanceLeadList)
async def rejected_leads(
    assigned_to: Optional[int] = Query(None),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_finance_access),
    db: AsyncSession = Depends(get_db),
):
    conditions = [Lead.finance_approved.is_(False)]
    if assigned_to is not None:
        conditions.append(Lead.assigned_to == assigned_to)
    return await _list_converted(db, conditions, Lead.approved_at.desc(), limit, offset)


@router.post("/leads/{lead_id}/approve", response_model=FinanceLeadResponse)
async def approve_lead(
    lead_id: int,
    current_user: User = Depends(require_finance_access),
    db: AsyncSession = Depends(get_db),
):
    lead = await get_lead_or_404(db, lead_id)
    commission_amount = await finance_service.approve_lead(db, lead, current_user)

    logger.info("Lead %d approved by %s", lead_id, current_user.email)
    return FinanceLeadResponse(
        message="Lead approved successfully and commission added.",
        lead=LeadOut.model_validate(lead),
        commission_amount=commission_amount,
    )


@router.post("/leads/{lead_id}/reject", response_model=FinanceLeadResponse)
async def reject_lead(
    lead_id: int,
    body: RejectLead,
    current_user: User = Depends(require_finance_access),
    db: AsyncSession = Depends(get_db),
):
    lead = await get_lead_or_404(db, lead_id)
    await finance_service.reject_lead(db, lead, current_user, body.rejection_reason)

    logger.info("Lead %d rejected by %s", lead_id, current_user.email)
    return FinanceLeadResponse(message="Lead rejected successfully.", lead=LeadOut.model_validate(lead))


@router.post("/leads/{lead_id}/commission-paid", response_model=FinanceLeadResponse)
async def mark_commission_paid(
    lead_id: int,
    current_user: User = Depends(require_finance_access),
    db: AsyncSession = Depends(get_db),
):
    lead = await get_lead_or_404(db, lead_id)
    await finance_service.mark_commission_paid(db, lead, current_user)

    return FinanceLeadResponse(
        message="Commission marked as paid successfully.",
        lead=LeadOut.model_validate(lead),
    )


@router.get("/statistics", response_model=FinanceStatistics)
async def statistics(
    current_user: User = Depends(require_finance_access),
    db: AsyncSession = Depends(get_db),
):
    return await finance_service.finance_statistics(db)
