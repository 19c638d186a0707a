import pytest
from httpx import AsyncClient

from models.cause import CauseStatus
from services.donation_service import DonationService

from conftest import create_cause, create_user


def cause_payload(**overrides):
    payload = {
        "name": "Library Renovation",
        "description": "New shelves and books for the village library.",
        "category": "education",
        "targetAmount": 2500,
    }
    payload.update(overrides)
    return payload


# ---------- causes ----------

@pytest.mark.asyncio
async def test_create_cause(client: AsyncClient, admin_user, admin_auth_headers):
    response = await client.post("/api/v1/admin/causes", json=cause_payload(), headers=admin_auth_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "Library Renovation"
    assert data["currentAmount"] == 0
    assert data["status"] == "active"
    assert data["createdBy"] == admin_user.id


@pytest.mark.asyncio
async def test_create_cause_validation(client: AsyncClient, admin_auth_headers):
    response = await client.post(
        "/api/v1/admin/causes", json=cause_payload(description=None), headers=admin_auth_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Name, description, and target amount are required"

    response = await client.post(
        "/api/v1/admin/causes", json=cause_payload(targetAmount=-5), headers=admin_auth_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Target amount must be greater than 0"


@pytest.mark.asyncio
async def test_duplicate_cause_name(client: AsyncClient, admin_auth_headers):
    await client.post("/api/v1/admin/causes", json=cause_payload(), headers=admin_auth_headers)
    response = await client.post("/api/v1/admin/causes", json=cause_payload(), headers=admin_auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "A cause with this name already exists"


@pytest.mark.asyncio
async def test_donor_cannot_manage_causes(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/admin/causes", json=cause_payload(), headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_causes_with_archived_filter(client: AsyncClient, db_session, admin_auth_headers):
    await create_cause(db_session)
    await create_cause(db_session, status=CauseStatus.PAUSED)
    await create_cause(db_session, status=CauseStatus.CANCELLED)

    response = await client.get("/api/v1/admin/causes?status=archived", headers=admin_auth_headers)
    body = response.json()
    assert body["total"] == 2
    assert {c["status"] for c in body["data"]} == {"paused", "cancelled"}

    response = await client.get("/api/v1/admin/causes?limit=2&page=2", headers=admin_auth_headers)
    body = response.json()
    assert body["total"] == 3
    assert body["totalPages"] == 2
    assert body["count"] == 1


@pytest.mark.asyncio
async def test_update_cause_keeps_financials(client: AsyncClient, db_session, admin_auth_headers):
    cause = await create_cause(db_session, current_amount=300)

    response = await client.put(
        f"/api/v1/admin/causes/{cause.id}",
        json={"description": "Updated", "status": "paused", "currentAmount": 0},
        headers=admin_auth_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["description"] == "Updated"
    assert data["status"] == "paused"
    assert data["currentAmount"] == 300


@pytest.mark.asyncio
async def test_delete_cause_with_donations_refused(client: AsyncClient, db_session, donor, admin_auth_headers):
    cause = await create_cause(db_session)
    await DonationService(db_session).donate(donor, cause.id, 10)

    response = await client.delete(f"/api/v1/admin/causes/{cause.id}", headers=admin_auth_headers)
    assert response.status_code == 400

    empty = await create_cause(db_session)
    response = await client.delete(f"/api/v1/admin/causes/{empty.id}", headers=admin_auth_headers)
    assert response.status_code == 200
    response = await client.get(f"/api/v1/admin/causes/{empty.id}", headers=admin_auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_archive_toggle(client: AsyncClient, db_session, admin_auth_headers):
    cause = await create_cause(db_session)

    response = await client.patch(f"/api/v1/admin/causes/{cause.id}/archive", headers=admin_auth_headers)
    assert response.json()["data"]["status"] == "cancelled"

    response = await client.patch(f"/api/v1/admin/causes/{cause.id}/archive", headers=admin_auth_headers)
    assert response.json()["data"]["status"] == "active"

    completed = await create_cause(db_session, status=CauseStatus.COMPLETED)
    response = await client.patch(f"/api/v1/admin/causes/{completed.id}/archive", headers=admin_auth_headers)
    assert response.json()["data"]["status"] == "cancelled"


# ---------- users ----------

@pytest.mark.asyncio
async def test_list_users_with_totals(client: AsyncClient, db_session, donor, admin_auth_headers):
    cause = await create_cause(db_session)
    await DonationService(db_session).donate(donor, cause.id, 40)

    response = await client.get("/api/v1/admin/users", headers=admin_auth_headers)

    assert response.status_code == 200
    users = {u["id"]: u for u in response.json()["data"]}
    assert users[donor.id]["totalDonated"] == 40
    assert users[donor.id]["donationCount"] == 1

    detail = (await client.get(f"/api/v1/admin/users/{donor.id}", headers=admin_auth_headers)).json()["data"]
    assert detail["donations"][0]["cause"] == cause.name


@pytest.mark.asyncio
async def test_change_role(client: AsyncClient, db_session, admin_user, admin_auth_headers):
    donor = await create_user(db_session)

    response = await client.put(
        f"/api/v1/admin/users/{donor.id}/role", json={"role": "admin"}, headers=admin_auth_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "admin"

    response = await client.put(
        f"/api/v1/admin/users/{admin_user.id}/role", json={"role": "donor"}, headers=admin_auth_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "You cannot change your own role"

    response = await client.put(
        f"/api/v1/admin/users/{donor.id}/role", json={"role": "superuser"}, headers=admin_auth_headers
    )
    assert response.status_code == 422
