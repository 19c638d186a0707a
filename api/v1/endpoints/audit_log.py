# app/api/v1/endpoints/audit_log.py
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from core.database import get_db
from core.permissions import require_roles
from models.audit_log import AuditEventType, AuditSeverity, AuditResourceType
from models.user import User, UserRole
from services.audit_service import AuditService
from schemas.audit_log import AuditLogFilter, AuditLogRead

router = APIRouter()


@router.get("")
async def list_audit_logs(
        page: int = Query(1, ge=1),
        limit: int = Query(50, ge=1, le=200),
        event_type: Optional[AuditEventType] = Query(None, alias="eventType"),
        severity: Optional[AuditSeverity] = Query(None),
        resource_type: Optional[AuditResourceType] = Query(None, alias="resourceType"),
        user_email: Optional[str] = Query(None, alias="userEmail"),
        start_date: Optional[datetime] = Query(None, alias="startDate"),
        end_date: Optional[datetime] = Query(None, alias="endDate"),
        admin: User = Depends(require_roles(UserRole.ADMIN)),
        db: AsyncSession = Depends(get_db)
):
    filters = AuditLogFilter(
        event_type=event_type,
        severity=severity,
        resource_type=resource_type,
        user_email=user_email,
        start_date=start_date,
        end_date=end_date,
    )
    return {"success": True, "data": await AuditService(db).list_logs(filters, page, limit)}


@router.get("/stats")
async def audit_stats(
        admin: User = Depends(require_roles(UserRole.ADMIN)),
        db: AsyncSession = Depends(get_db)
):
    return {"success": True, "data": await AuditService(db).get_stats()}


@router.get("/{log_id}")
async def get_audit_log(
        log_id: int,
        admin: User = Depends(require_roles(UserRole.ADMIN)),
        db: AsyncSession = Depends(get_db)
):
    log = await AuditService(db).get_log(log_id)
    return {"success": True, "data": AuditLogRead.model_validate(log).model_dump(by_alias=True)}
