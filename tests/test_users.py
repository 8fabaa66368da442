"""Tests for manager-only user administration."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from app.models.audit_log import AuditLog
from app.models.category_limit import CategoryLimit
from app.models.enums import LeadCategory, UserRole
from app.models.user import User


@pytest.mark.asyncio
async def test_manager_lists_users(client, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)
    await make_user(UserRole.SALES)

    resp = await client.get("/api/v1/users/", headers=auth_headers(manager))
    assert resp.status_code == 200
    assert {u["role"] for u in resp.json()} == {"manager", "sales"}


@pytest.mark.asyncio
async def test_sales_cannot_manage_users(client, make_user, auth_headers):
    sales = await make_user(UserRole.SALES)

    resp = await client.get("/api/v1/users/", headers=auth_headers(sales))
    assert resp.status_code == 403
    assert resp.json()["user_role"] == "sales"


@pytest.mark.asyncio
async def test_manager_promotes_user_to_finance(client, db, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)
    sales = await make_user(UserRole.SALES)

    resp = await client.patch(
        f"/api/v1/users/{sales.id}",
        json={"role": "finance", "commission": "5.00"},
        headers=auth_headers(manager),
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "finance"

    result = await db.execute(select(AuditLog).where(AuditLog.event == "user_role_changed"))
    entry = result.scalar_one()
    assert entry.actor_id == manager.id
    assert entry.details == {"user_id": sales.id, "from": "sales", "to": "finance"}

    # Promotion applies on the very next request with the same token
    resp = await client.get("/api/v1/finance/pending", headers=auth_headers(sales))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_manager_cannot_change_own_role(client, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)

    resp = await client.patch(f"/api/v1/users/{manager.id}", json={"role": "sales"}, headers=auth_headers(manager))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "You cannot change your own role."


@pytest.mark.asyncio
async def test_update_missing_user(client, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)

    resp = await client.patch("/api/v1/users/999", json={"is_active": False}, headers=auth_headers(manager))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_manager_creates_user(client, db, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)

    resp = await client.post(
        "/api/v1/users/",
        json={"name": "New Seller", "email": "seller@example.com", "password": "longenough", "role": "sales"},
        headers=auth_headers(manager),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User created successfully."
    assert body["user"]["role"] == "sales"
    assert Decimal(body["user"]["target_price"]) == 50000

    # The new account can sign in straight away
    resp = await client.post("/api/v1/auth/login", json={"email": "seller@example.com", "password": "longenough"})
    assert resp.status_code == 200

    result = await db.execute(select(AuditLog).where(AuditLog.event == "user_created"))
    assert result.scalar_one().actor_id == manager.id


@pytest.mark.asyncio
async def test_create_user_rejects_taken_email(client, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)
    await make_user(UserRole.SALES)

    resp = await client.post(
        "/api/v1/users/",
        json={"name": "Copy", "email": "sales@example.com", "password": "longenough", "role": "sales"},
        headers=auth_headers(manager),
    )
    assert resp.status_code == 422
    assert resp.json()["detail"] == "The email has already been taken."


@pytest.mark.asyncio
async def test_create_user_validates_password_length(client, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)

    resp = await client.post(
        "/api/v1/users/",
        json={"name": "Short", "email": "short@example.com", "password": "abc", "role": "sales"},
        headers=auth_headers(manager),
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_sales_cannot_create_or_delete_users(client, make_user, auth_headers):
    sales = await make_user(UserRole.SALES)
    finance = await make_user(UserRole.FINANCE)

    resp = await client.post(
        "/api/v1/users/",
        json={"name": "Sneaky", "email": "sneaky@example.com", "password": "longenough", "role": "manager"},
        headers=auth_headers(sales),
    )
    assert resp.status_code == 403

    resp = await client.delete(f"/api/v1/users/{finance.id}", headers=auth_headers(sales))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_manager_cannot_delete_self(client, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)

    resp = await client.delete(f"/api/v1/users/{manager.id}", headers=auth_headers(manager))
    assert resp.status_code == 422
    assert resp.json()["detail"] == "You cannot delete your own account."


@pytest.mark.asyncio
async def test_cannot_delete_user_with_assigned_leads(client, make_user, make_lead, auth_headers):
    manager = await make_user(UserRole.MANAGER)
    sales = await make_user(UserRole.SALES)
    await make_lead("Lead A", assigned_to=sales.id)
    await make_lead("Lead B", assigned_to=sales.id)

    resp = await client.delete(f"/api/v1/users/{sales.id}", headers=auth_headers(manager))
    assert resp.status_code == 422
    assert resp.json()["detail"] == (
        "Cannot delete user. User has 2 assigned lead(s). Please reassign them first."
    )


@pytest.mark.asyncio
async def test_manager_deletes_user_and_limits(client, db, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)
    sales = await make_user(UserRole.SALES, name="Leaving Seller")
    db.add(CategoryLimit(user_id=sales.id, category=LeadCategory.LOCAL_NEW, limit=5))
    await db.commit()

    resp = await client.delete(f"/api/v1/users/{sales.id}", headers=auth_headers(manager))
    assert resp.status_code == 200
    assert resp.json()["message"] == "User 'Leaving Seller' deleted successfully."

    assert await db.scalar(select(User.id).where(User.id == sales.id)) is None
    assert await db.scalar(select(CategoryLimit.id).where(CategoryLimit.user_id == sales.id)) is None

    result = await db.execute(select(AuditLog).where(AuditLog.event == "user_deleted"))
    assert result.scalar_one().details == {"user_id": sales.id, "name": "Leaving Seller"}


@pytest.mark.asyncio
async def test_delete_missing_user(client, make_user, auth_headers):
    manager = await make_user(UserRole.MANAGER)

    resp = await client.delete("/api/v1/users/999", headers=auth_headers(manager))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_sales_list_is_open_to_sales(client, make_user, auth_headers):
    await make_user(UserRole.MANAGER, name="Maya Manager")
    zed = await make_user(UserRole.SALES, name="Zed Seller")
    amy = await make_user(UserRole.SALES, email="amy@example.com", name="Amy Seller")

    resp = await client.get("/api/v1/users/sales", headers=auth_headers(zed))
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [amy.id, zed.id]


@pytest.mark.asyncio
async def test_assignable_list_puts_managers_first(client, make_user, auth_headers):
    sales = await make_user(UserRole.SALES, name="Adam Seller")
    manager = await make_user(UserRole.MANAGER, name="Zoe Manager")
    await make_user(UserRole.FINANCE, name="Fin Finance")

    resp = await client.get("/api/v1/users/assignable", headers=auth_headers(sales))
    assert resp.status_code == 200
    assert [(u["id"], u["role"]) for u in resp.json()] == [(manager.id, "manager"), (sales.id, "sales")]
