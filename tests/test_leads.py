"""Tests for lead CRUD, filtering and statistics."""

import pytest

from app.models.enums import LeadPriority, LeadStatus, UserRole


@pytest.mark.asyncio
async def test_create_lead(client, make_user, auth_headers):
    sales = await make_user(UserRole.SALES)

    resp = await client.post(
        "/api/v1/leads/",
        json={
            "lead_name": "Ahmed - Land Cruiser",
            "car_company": "Toyota",
            "model": "Land Cruiser",
            "model_year": 2024,
            "selling_price": "250000.00",
            "cost_price": "230000.00",
            "assigned_to": sales.id,
        },
        headers=auth_headers(sales),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["lead_name"] == "Ahmed - Land Cruiser"
    assert data["status"] == "new"
    assert data["priority"] == "medium"
    assert data["is_active"] is True
    assert data["finance_approved"] is None
    assert data["quantity"] == 1


@pytest.mark.asyncio
async def test_create_requires_lead_name(client, make_user, auth_headers):
    sales = await make_user(UserRole.SALES)

    resp = await client.post("/api/v1/leads/", json={"car_company": "Nissan"}, headers=auth_headers(sales))
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_leads_require_authentication(client):
    resp = await client.get("/api/v1/leads/")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Unauthenticated."}


@pytest.mark.asyncio
async def test_list_filters_and_search(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    await make_lead("Patrol buyer", car_company="Nissan", status=LeadStatus.NEW)
    await make_lead("Camry buyer", car_company="Toyota", status=LeadStatus.CONVERTED)
    await make_lead("Old buyer", car_company="Toyota", status=LeadStatus.NOT_CONVERTED, is_active=False)

    headers = auth_headers(sales)

    resp = await client.get("/api/v1/leads/", headers=headers)
    assert resp.json()["total"] == 3

    resp = await client.get("/api/v1/leads/?status=converted", headers=headers)
    assert [lead["lead_name"] for lead in resp.json()["leads"]] == ["Camry buyer"]

    resp = await client.get("/api/v1/leads/?search=toyota&is_active=true", headers=headers)
    assert [lead["lead_name"] for lead in resp.json()["leads"]] == ["Camry buyer"]

    resp = await client.get("/api/v1/leads/?limit=2&offset=0", headers=headers)
    data = resp.json()
    assert data["total"] == 3
    assert len(data["leads"]) == 2


@pytest.mark.asyncio
async def test_get_missing_lead_returns_404(client, make_user, auth_headers):
    sales = await make_user(UserRole.SALES)

    resp = await client.get("/api/v1/leads/999", headers=auth_headers(sales))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_status_clears_reason_unless_not_converted(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    lead = await make_lead("Hesitant buyer")
    headers = auth_headers(sales)

    resp = await client.put(
        f"/api/v1/leads/{lead.id}",
        json={"status": "not_converted", "not_converted_reason": "Price too high"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["not_converted_reason"] == "Price too high"

    # Moving back to another status drops the reason
    resp = await client.put(f"/api/v1/leads/{lead.id}", json={"status": "converted"}, headers=headers)
    data = resp.json()
    assert data["status"] == "converted"
    assert data["not_converted_reason"] is None
    assert data["lead_name"] == "Hesitant buyer"


@pytest.mark.asyncio
async def test_update_bumps_updated_at(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    lead = await make_lead("Stale buyer", days_ago=100)

    resp = await client.put(f"/api/v1/leads/{lead.id}", json={"notes": "Called again"}, headers=auth_headers(sales))
    assert resp.status_code == 200
    assert resp.json()["updated_at"] > lead.updated_at.isoformat()


@pytest.mark.asyncio
async def test_manual_deactivate_and_activate(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    lead = await make_lead("Buyer")
    headers = auth_headers(sales)

    resp = await client.patch(f"/api/v1/leads/{lead.id}/deactivate", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    resp = await client.patch(f"/api/v1/leads/{lead.id}/activate", headers=headers)
    assert resp.json()["is_active"] is True


@pytest.mark.asyncio
async def test_delete_is_manager_only(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    manager = await make_user(UserRole.MANAGER)
    lead = await make_lead("Buyer")

    resp = await client.delete(f"/api/v1/leads/{lead.id}", headers=auth_headers(sales))
    assert resp.status_code == 403
    assert resp.json()["required_roles"] == ["manager"]

    resp = await client.delete(f"/api/v1/leads/{lead.id}", headers=auth_headers(manager))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Lead deleted successfully."}

    resp = await client.get(f"/api/v1/leads/{lead.id}", headers=auth_headers(manager))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_statistics(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    await make_lead("A", status=LeadStatus.NEW, priority=LeadPriority.HIGH)
    await make_lead("B", status=LeadStatus.NEW, priority=LeadPriority.LOW)
    await make_lead("C", status=LeadStatus.CONVERTED)
    await make_lead("D", status=LeadStatus.NOT_CONVERTED, is_active=False)

    resp = await client.get("/api/v1/leads/statistics", headers=auth_headers(sales))
    assert resp.status_code == 200
    assert resp.json() == {
        "total": 4,
        "active": 3,
        "new": 2,
        "converted": 1,
        "not_converted": 1,
        "high_priority": 1,
        "medium_priority": 2,
        "low_priority": 1,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["lead_name", "status", "priority", "quantity"])
async def test_update_rejects_null_for_required_fields(client, db, make_user, make_lead, auth_headers, field):
    sales = await make_user(UserRole.SALES)
    lead = await make_lead("Keep me", status=LeadStatus.CONVERTED)

    resp = await client.put(f"/api/v1/leads/{lead.id}", json={field: None}, headers=auth_headers(sales))
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["loc"] == ["body", field]

    resp = await client.get(f"/api/v1/leads/{lead.id}", headers=auth_headers(sales))
    data = resp.json()
    assert data["lead_name"] == "Keep me"
    assert data["status"] == "converted"


@pytest.mark.asyncio
async def test_update_allows_clearing_optional_fields(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    lead = await make_lead("Buyer", notes="Call back Monday", car_company="Lexus")

    resp = await client.put(
        f"/api/v1/leads/{lead.id}", json={"notes": None, "car_company": None}, headers=auth_headers(sales)
    )
    assert resp.status_code == 200
    assert resp.json()["notes"] is None
    assert resp.json()["car_company"] is None


@pytest.mark.asyncio
async def test_manager_bulk_deletes_leads(client, make_user, make_lead, auth_headers):
    manager = await make_user(UserRole.MANAGER)
    doomed = [await make_lead(f"Doomed {i}") for i in range(2)]
    kept = await make_lead("Kept")

    resp = await client.post(
        "/api/v1/leads/bulk-delete", json={"ids": [lead.id for lead in doomed]}, headers=auth_headers(manager)
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "2 lead(s) deleted successfully."

    resp = await client.get("/api/v1/leads/", headers=auth_headers(manager))
    assert [lead["id"] for lead in resp.json()["leads"]] == [kept.id]


@pytest.mark.asyncio
async def test_bulk_delete_with_unknown_id_deletes_nothing(client, make_user, make_lead, auth_headers):
    manager = await make_user(UserRole.MANAGER)
    lead = await make_lead("Survivor")

    resp = await client.post(
        "/api/v1/leads/bulk-delete", json={"ids": [lead.id, 999]}, headers=auth_headers(manager)
    )
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Leads not found: 999"

    resp = await client.get(f"/api/v1/leads/{lead.id}", headers=auth_headers(manager))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_bulk_delete_is_manager_only_and_needs_ids(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES)
    lead = await make_lead()

    resp = await client.post("/api/v1/leads/bulk-delete", json={"ids": [lead.id]}, headers=auth_headers(sales))
    assert resp.status_code == 403

    manager = await make_user(UserRole.MANAGER)
    resp = await client.post("/api/v1/leads/bulk-delete", json={"ids": []}, headers=auth_headers(manager))
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_export_rows(client, make_user, make_lead, auth_headers):
    sales = await make_user(UserRole.SALES, name="Sam Seller")
    assigned = await make_lead("Land Cruiser", assigned_to=sales.id, car_company="Toyota", model_year=2024)
    unassigned = await make_lead("Patrol", status=LeadStatus.CONVERTED, priority=LeadPriority.HIGH)

    resp = await client.get("/api/v1/leads/export", headers=auth_headers(sales))
    assert resp.status_code == 200
    rows = resp.json()["data"]
    assert [row["ID"] for row in rows] == [assigned.id, unassigned.id]
    assert rows[0]["Lead Name"] == "Land Cruiser"
    assert rows[0]["Car Company"] == "Toyota"
    assert rows[0]["Model Year"] == 2024
    assert rows[0]["Assigned To"] == "Sam Seller"
    assert rows[1]["Assigned To"] == "N/A"
    assert rows[1]["Status"] == "converted"
    assert rows[1]["Priority"] == "high"

    resp = await client.get("/api/v1/leads/export", params={"status": "converted"}, headers=auth_headers(sales))
    assert [row["ID"] for row in resp.json()["data"]] == [unassigned.id]
