"""Leads endpoints.

- GET    /api/v1/leads/                 → List leads (filters + pagination)
- GET    /api/v1/leads/statistics       → Counts by status and priority
- GET    /api/v1/leads/export           → Flat rows for spreadsheet export
- POST   /api/v1/leads/bulk-delete      → Delete several leads (manager only)
- POST   /api/v1/leads/                 → Create a lead
- GET    /api/v1/leads/{id}             → Lead detail
- PUT    /api/v1/leads/{id}             → Update a lead
- DELETE /api/v1/leads/{id}             → Delete a lead (manager only)
- PATCH  /api/v1/leads/{id}/deactivate  → Mark lead inactive
- PATCH  /api/v1/leads/{id}/activate    → Mark lead active again
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user, require_manager
from app.models.enums import LeadPriority, LeadStatus
from app.models.lead import Lead
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.lead import LeadBulkDelete, LeadCreate, LeadExport, LeadList, LeadOut, LeadStatsOut, LeadUpdate
from app.services.leads import get_lead_or_404

router = APIRouter()
logger = logging.getLogger(__name__)


def _apply_status_rules(lead: Lead) -> None:
    # The not-converted reason only applies to not-converted leads
    if lead.status != LeadStatus.NOT_CONVERTED:
        lead.not_converted_reason = None


@router.get("/", response_model=LeadList)
async def list_leads(
    status: Optional[LeadStatus] = Query(None, description="Filter by status"),
    priority: Optional[LeadPriority] = Query(None, description="Filter by priority"),
    assigned_to: Optional[int] = Query(None, description="Filter by assigned user"),
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    search: Optional[str] = Query(None, description="Search lead name, car company or model"),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List leads with optional filters, newest first."""
    conditions = []
    if status:
        conditions.append(Lead.status == status)
    if priority:
        conditions.append(Lead.priority == priority)
    if assigned_to is not None:
        conditions.append(Lead.assigned_to == assigned_to)
    if is_active is not None:
        conditions.append(Lead.is_active.is_(is_active))
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            Lead.lead_name.ilike(pattern),
            Lead.car_company.ilike(pattern),
            Lead.model.ilike(pattern),
        ))

    total_result = await db.execute(select(func.count(Lead.id)).where(*conditions))
    total = total_result.scalar() or 0

    query = (
        select(Lead)
        .where(*conditions)
        .order_by(Lead.created_at.desc(), Lead.id.desc())
        .limit(limit)
        .offset(offset)
    )
    result = await db.execute(query)

    return LeadList(
        leads=[LeadOut.model_validate(lead) for lead in result.scalars().all()],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/statistics", response_model=LeadStatsOut)
async def lead_statistics(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get lead counts for the dashboard."""
    async def count(*conditions):
        result = await db.execute(select(func.count(Lead.id)).where(*conditions))
        return result.scalar() or 0

    return LeadStatsOut(
        total=await count(),
        active=await count(Lead.is_active.is_(True)),
        new=await count(Lead.status == LeadStatus.NEW),
        converted=await count(Lead.status == LeadStatus.CONVERTED),
        not_converted=await count(Lead.status == LeadStatus.NOT_CONVERTED),
        high_priority=await count(Lead.priority == LeadPriority.HIGH),
        medium_priority=await count(Lead.priority == LeadPriority.MEDIUM),
        low_priority=await count(Lead.priority == LeadPriority.LOW),
    )


@router.post("/", response_model=LeadOut, status_code=201)
async def create_lead(
    lead_in: LeadCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new lead."""
    lead = Lead(**lead_in.model_dump(), is_active=True)
    _apply_status_rules(lead)

    db.add(lead)
    await db.commit()
    await db.refresh(lead)

    logger.info("Created lead %d by user %d: %s", lead.id, current_user.id, lead.lead_name)
    return lead


@router.get("/export", response_model=LeadExport)
async def export_leads(
    status: Optional[LeadStatus] = Query(None, description="Filter by status"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Every lead as a flat row with its assignee's name."""
    query = (
        select(Lead, User.name)
        .outerjoin(User, Lead.assigned_to == User.id)
        .order_by(Lead.id)
    )
    if status:
        query = query.where(Lead.status == status)
    result = await db.execute(query)

    rows = []
    for lead, assignee in result.all():
        rows.append({
            "ID": lead.id,
            "Lead Name": lead.lead_name,
            "Status": lead.status.value,
            "Source": lead.source,
            "Car Company": lead.car_company,
            "Model": lead.model,
            "Model Year": lead.model_year,
            "Selling Price": str(lead.selling_price) if lead.selling_price is not None else None,
            "Priority": lead.priority.value,
            "Assigned To": assignee or "N/A",
            "Created At": lead.created_at.strftime("%Y-%m-%d %H:%M:%S") if lead.created_at else None,
        })
    return LeadExport(data=rows)


@router.post("/bulk-delete", response_model=MessageResponse)
async def bulk_delete_leads(
    payload: LeadBulkDelete,
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    """Delete several leads at once. Fails without deleting if any id is unknown."""
    ids = set(payload.ids)
    result = await db.execute(select(Lead.id).where(Lead.id.in_(ids)))
    missing = sorted(ids - set(result.scalars().all()))
    if missing:
        raise HTTPException(status_code=422, detail=f"Leads not found: {', '.join(str(i) for i in missing)}")

    result = await db.execute(delete(Lead).where(Lead.id.in_(ids)))
    await db.commit()

    logger.info("Bulk deleted %d lead(s) by manager %d", result.rowcount, current_user.id)
    return {"message": f"{result.rowcount} lead(s) deleted successfully."}


@router.get("/{lead_id}", response_model=LeadOut)
async def get_lead(
    lead_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_lead_or_404(db, lead_id)


@router.put("/{lead_id}", response_model=LeadOut)
async def update_lead(
    lead_id: int,
    lead_in: LeadUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update lead fields. Status may move freely between values."""
    lead = await get_lead_or_404(db, lead_id)

    for key, value in lead_in.model_dump(exclude_unset=True).items():
        setattr(lead, key, value)
    _apply_status_rules(lead)

    await db.commit()
    await db.refresh(lead)

    logger.info("Updated lead %d by user %d", lead_id, current_user.id)
    return lead


@router.delete("/{lead_id}", response_model=MessageResponse)
async def delete_lead(
    lead_id: int,
    current_user: User = Depends(require_manager),
    db: AsyncSession = Depends(get_db),
):
    lead = await get_lead_or_404(db, lead_id)
    await db.delete(lead)
    await db.commit()

    logger.info("Deleted lead %d by manager %d", lead_id, current_user.id)
    return {"message": "Lead deleted successfully."}


@router.patch("/{lead_id}/deactivate", response_model=LeadOut)
async def deactivate_lead(
    lead_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Manually retire a lead."""
    lead = await get_lead_or_404(db, lead_id)
    lead.is_active = False
    await db.commit()
    await db.refresh(lead)

    logger.info("Lead %d deactivated by user %d", lead_id, current_user.id)
    return lead


@router.patch("/{lead_id}/activate", response_model=LeadOut)
async def activate_lead(
    lead_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    lead = await get_lead_or_404(db, lead_id)
    lead.is_active = True
    await db.commit()
    await db.refresh(lead)

    logger.info("Lead %d activated by user %d", lead_id, current_user.id)
    return lead
