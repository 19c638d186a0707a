import pytest
from httpx import AsyncClient
from sqlalchemy import select

from models.audit_log import AuditLog, AuditEventType, AuditSeverity
from services.audit_service import AuditService
from services.donation_service import DonationService

from conftest import create_cause


@pytest.mark.asyncio
async def test_donation_is_audited(db_session, donor):
    cause = await create_cause(db_session)
    result = await DonationService(db_session).donate(donor, cause.id, 15)

    log = (await db_session.execute(
        select(AuditLog).where(AuditLog.event_type == AuditEventType.DONATION_CREATED)
    )).scalar_one()
    assert log.user_id == donor.id
    assert log.resource_id == result["donation"]["paymentId"]
    assert log.event_metadata["amount"] == 15
    assert log.event_metadata["causeName"] == cause.name


@pytest.mark.asyncio
async def test_sensitive_metadata_dropped(db_session):
    await AuditService(db_session).create_audit_log(
        AuditEventType.SYSTEM_EVENT,
        "maintenance",
        metadata={"password": "hunter2", "access_token": "abc", "note": "kept"},
    )

    log = (await db_session.execute(select(AuditLog))).scalar_one()
    assert log.event_metadata == {"note": "kept"}
    assert log.severity == AuditSeverity.INFO


@pytest.mark.asyncio
async def test_audit_failure_never_raises(db_session):
    # event_type is NOT NULL, so the second write fails on commit
    await AuditService(db_session).create_audit_log(AuditEventType.SYSTEM_EVENT, "x" * 10, user_email=None)
    await AuditService(db_session).create_audit_log(None, "missing event type")

    logs = (await db_session.execute(select(AuditLog))).scalars().all()
    assert len(logs) == 1


@pytest.mark.asyncio
async def test_admin_reads_audit_logs(client: AsyncClient, admin_auth_headers):
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "age": 36,
        "email": "ada.lovelace@gmail.com",
        "password": "Analytical1",
    }
    await client.post("/api/v1/auth/register", json=payload)
    await client.post("/api/v1/auth/login", json={"email": payload["email"], "password": "wrong-pass"})

    response = await client.get("/api/v1/audit-logs?eventType=USER_REGISTRATION", headers=admin_auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pagination"]["total"] == 1
    assert data["logs"][0]["userEmail"] == "ada.lovelace@gmail.com"

    log_id = data["logs"][0]["id"]
    response = await client.get(f"/api/v1/audit-logs/{log_id}", headers=admin_auth_headers)
    assert response.json()["data"]["eventType"] == "USER_REGISTRATION"

    stats = (await client.get("/api/v1/audit-logs/stats", headers=admin_auth_headers)).json()["data"]
    assert stats["byEventType"]["USER_LOGIN_FAILED"] == 1
    assert stats["bySeverity"]["WARNING"] == 1
    assert stats["last24Hours"] == stats["total"]


@pytest.mark.asyncio
async def test_audit_logs_admin_only(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/audit-logs", headers=auth_headers)
    assert response.status_code == 403

    response = await client.get("/api/v1/audit-logs/999", headers=auth_headers)
    assert response.status_code == 403
