"""Finance approval workflow for converted leads.

Approve/reject only applies to converted leads that have not been processed
yet. Approving credits the assigned sales user with their commission on the
lead's profit (selling price minus cost price).
"""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import LeadStatus, UserRole
from app.models.lead import Lead
from app.models.user import User
from app.services.audit_service import log_event

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def _ensure_pending(lead: Lead, action: str):
    if lead.status != LeadStatus.CONVERTED:
        raise HTTPException(status_code=422, detail=f"Only converted leads can be {action}.")
    if lead.finance_approved is not None:
        raise HTTPException(status_code=422, detail="This lead has already been processed.")


def calculate_commission(lead: Lead, sales_user: User) -> Decimal:
    """Commission on profit: base rate plus bonus rate, both percentages."""
    profit = Decimal(lead.selling_price or 0) - Decimal(lead.cost_price or 0)
    amount = profit * Decimal(sales_user.commission or 0) / 100
    if sales_user.bonus_commission and sales_user.bonus_commission > 0:
        amount += profit * Decimal(sales_user.bonus_commission) / 100
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


async def approve_lead(db: AsyncSession, lead: Lead, approver: User) -> Optional[Decimal]:
    """Approve a converted lead and credit commission. Returns the amount credited, if any."""
    _ensure_pending(lead, "approved")

    lead.finance_approved = True
    lead.approved_by = approver.id
    lead.approved_at = datetime.utcnow()
    lead.rejection_reason = None

    commission_amount = None
    if lead.assigned_to:
        sales_user = await db.get(User, lead.assigned_to)
        if sales_user and sales_user.role == UserRole.SALES:
            commission_amount = calculate_commission(lead, sales_user)
            sales_user.commission_earned = Decimal(sales_user.commission_earned or 0) + commission_amount

    # Approval and commission are committed together
    await db.commit()
    await db.refresh(lead)

    await log_event(
        db,
        "lead_approved",
        {
            "lead_id": lead.id,
            "commission_amount": str(commission_amount) if commission_amount is not None else None,
        },
        actor_id=approver.id,
    )
    return commission_amount


async def reject_lead(db: AsyncSession, lead: Lead, approver: User, reason: str) -> None:
    _ensure_pending(lead, "rejected")

    lead.finance_approved = False
    lead.approved_by = approver.id
    lead.approved_at = datetime.utcnow()
    lead.rejection_reason = reason
    await db.commit()
    await db.refresh(lead)

    await log_event(db, "lead_rejected", {"lead_id": lead.id, "reason": reason}, actor_id=approver.id)


async def mark_commission_paid(db: AsyncSession, lead: Lead, actor: User) -> None:
    if not lead.is_approved:
        raise HTTPException(status_code=422, detail="Only approved leads can have commission marked as paid.")
    if lead.commission_paid:
        raise HTTPException(
            status_code=422,
            detail="Commission has already been marked as paid for this lead.",
        )

    lead.commission_paid = True
    await db.commit()
    await db.refresh(lead)

    await log_event(db, "commission_paid", {"lead_id": lead.id}, actor_id=actor.id)


async def finance_statistics(db: AsyncSession) -> dict:
    converted = Lead.status == LeadStatus.CONVERTED
    approved = (converted, Lead.finance_approved.is_(True))
    profit = func.coalesce(Lead.selling_price, 0) - func.coalesce(Lead.cost_price, 0)

    async def scalar(query):
        result = await db.execute(query)
        return result.scalar() or 0

    return {
        "pending_approvals": await scalar(
            select(func.count(Lead.id)).where(converted, Lead.finance_approved.is_(None))
        ),
        "approved_leads": await scalar(select(func.count(Lead.id)).where(*approved)),
        "rejected_leads": await scalar(
            select(func.count(Lead.id)).where(converted, Lead.finance_approved.is_(False))
        ),
        "pending_commission_payment": await scalar(
            select(func.count(Lead.id)).where(*approved, Lead.commission_paid.is_(False))
        ),
        "total_approved_value": _money(await scalar(select(func.sum(Lead.selling_price)).where(*approved))),
        "total_commission_paid": _money(await scalar(
            select(func.sum(profit)).where(*approved, Lead.commission_paid.is_(True))
        )),
        "total_pending_commission": _money(await scalar(
            select(func.sum(profit)).where(*approved, Lead.commission_paid.is_(False))
        )),
    }
