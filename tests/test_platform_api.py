from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient

from models.cause import CauseStatus, CauseCategory
from services.cause_service import CauseService

from conftest import create_cause


# ---------- config ----------

@pytest.mark.asyncio
async def test_default_config(client: AsyncClient):
    response = await client.get("/api/v1/config")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["minimumDonation"] == {"amount": 1.0, "enabled": True}
    assert data["currency"]["code"] == "USD"
    assert data["currency"]["decimalPlaces"] == 2


@pytest.mark.asyncio
async def test_admin_updates_config(client: AsyncClient, admin_auth_headers):
    response = await client.put(
        "/api/v1/config",
        json={"minimumDonation": {"amount": 5}, "currency": {"code": "EUR", "symbol": "€", "decimalPlaces": 2}},
        headers=admin_auth_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["minimumDonation"] == {"amount": 5.0, "enabled": True}
    assert data["currency"]["code"] == "EUR"
    assert data["currency"]["symbol"] == "€"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload, message", [
    ({"minimumDonation": {"amount": 0}}, "Minimum donation amount must be at least 0.01"),
    ({"currency": {"code": "XYZ"}}, "Currency code must be one of: USD, EUR, GBP, INR, CAD, AUD, JPY"),
    ({"currency": {"position": "middle"}}, 'Currency position must be "before" or "after"'),
    ({"currency": {"decimalPlaces": 7}}, "Decimal places must be between 0 and 4"),
])
async def test_config_validation(client: AsyncClient, admin_auth_headers, payload, message):
    response = await client.put("/api/v1/config", json=payload, headers=admin_auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == message


@pytest.mark.asyncio
async def test_donor_cannot_update_config(client: AsyncClient, auth_headers):
    response = await client.put("/api/v1/config", json={"minimumDonation": {"amount": 5}}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_currency_presets(client: AsyncClient):
    response = await client.get("/api/v1/config/currency-presets")
    codes = [p["code"] for p in response.json()["data"]]
    assert codes == ["USD", "EUR", "GBP", "INR", "CAD", "AUD", "JPY"]


@pytest.mark.asyncio
async def test_minimum_from_config_applies_to_donations(client: AsyncClient, db_session, admin_auth_headers, auth_headers):
    cause = await create_cause(db_session)
    await client.put("/api/v1/config", json={"minimumDonation": {"amount": 10}}, headers=admin_auth_headers)

    response = await client.post("/api/v1/donate", json={"causeId": cause.id, "amount": 5}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"detail": "Minimum donation amount is 10.0", "code": "BELOW_MINIMUM"}


# ---------- public causes ----------

@pytest.mark.asyncio
async def test_public_causes(client: AsyncClient, db_session):
    wells = await create_cause(db_session, name="Aquifer Wells", category=CauseCategory.ENVIRONMENT)
    await create_cause(db_session, name="School Meals", category=CauseCategory.POVERTY)
    await create_cause(db_session, name="Paused Aquifer Drive", status=CauseStatus.PAUSED)

    response = await client.get("/api/v1/causes")
    assert response.json()["count"] == 2

    response = await client.get("/api/v1/causes?search=aquifer")
    assert [c["id"] for c in response.json()["data"]] == [wells.id]

    response = await client.get("/api/v1/causes?category=poverty")
    assert [c["name"] for c in response.json()["data"]] == ["School Meals"]

    response = await client.get(f"/api/v1/causes/{wells.id}")
    assert response.json()["data"]["percentageAchieved"] == 0

    response = await client.get("/api/v1/causes/987654")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_category_labels(client: AsyncClient):
    response = await client.get("/api/v1/causes/categories/list")
    values = [c["value"] for c in response.json()["data"]]
    assert "disaster-relief" in values
    assert len(values) == 7


# ---------- maintenance ----------

@pytest.mark.asyncio
async def test_complete_expired_causes(db_session):
    expired = await create_cause(db_session, end_date=datetime.utcnow() - timedelta(days=1))
    running = await create_cause(db_session, end_date=datetime.utcnow() + timedelta(days=5))
    paused = await create_cause(db_session, status=CauseStatus.PAUSED, end_date=datetime.utcnow() - timedelta(days=1))

    assert await CauseService(db_session).complete_expired_causes() == 1

    for cause in (expired, running, paused):
        await db_session.refresh(cause)
    assert expired.status == CauseStatus.COMPLETED
    assert running.status == CauseStatus.ACTIVE
    assert paused.status == CauseStatus.PAUSED


# ---------- health ----------

@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "connected"
