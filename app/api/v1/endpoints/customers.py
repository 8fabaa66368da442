"""Customer records endpoints.

- GET    /api/v1/customers/       → List customers (status filter, search, pagination)
- POST   /api/v1/customers/       → Create a customer
- GET    /api/v1/customers/{id}   → Customer detail
- PUT    /api/v1/customers/{id}   → Update a customer
- DELETE /api/v1/customers/{id}   → Delete a customer (leads keep no customer link)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.customer import Customer
from app.models.enums import CustomerStatus
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.customer import CustomerCreate, CustomerList, CustomerOut, CustomerResponse, CustomerUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


async def _get_customer_or_404(db: AsyncSession, customer_id: int) -> Customer:
    customer = await db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.get("/", response_model=CustomerList)
async def list_customers(
    status: Optional[CustomerStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Search full name, email or phone"),
    limit: int = Query(15, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List customers, newest first."""
    conditions = []
    if status:
        conditions.append(Customer.status == status)
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            Customer.full_name.ilike(pattern),
            Customer.email.ilike(pattern),
            Customer.phone.ilike(pattern),
        ))

    total_result = await db.execute(select(func.count(Customer.id)).where(*conditions))
    total = total_result.scalar() or 0

    result = await db.execute(
        select(Customer)
        .where(*conditions)
        .order_by(Customer.created_at.desc(), Customer.id.desc())
        .limit(limit)
        .offset(offset)
    )
    customers = [CustomerOut.model_validate(c) for c in result.scalars().all()]
    return CustomerList(customers=customers, total=total, limit=limit, offset=offset)


@router.post("/", response_model=CustomerResponse, status_code=201)
async def create_customer(
    customer_in: CustomerCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    customer = Customer(**customer_in.model_dump())
    db.add(customer)
    await db.commit()
    await db.refresh(customer)

    logger.info("Created customer %d by user %d", customer.id, current_user.id)
    return CustomerResponse(message="Customer created successfully.", customer=CustomerOut.model_validate(customer))


@router.get("/{customer_id}", response_model=CustomerOut)
async def get_customer(
    customer_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_customer_or_404(db, customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_in: CustomerUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    customer = await _get_customer_or_404(db, customer_id)

    for key, value in customer_in.model_dump(exclude_unset=True).items():
        setattr(customer, key, value)

    await db.commit()
    await db.refresh(customer)

    return CustomerResponse(message="Customer updated successfully.", customer=CustomerOut.model_validate(customer))


@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer(
    customer_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    customer = await _get_customer_or_404(db, customer_id)
    await db.delete(customer)
    await db.commit()

    logger.info("Deleted customer %d by user %d", customer_id, current_user.id)
    return {"message": "Customer deleted successfully."}
