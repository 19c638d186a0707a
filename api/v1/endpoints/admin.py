# app/api/v1/endpoints/admin.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from core.database import get_db
from core.dependencies import get_audit_service
from core.permissions import require_roles
from models.user import User, UserRole
from services.audit_service import AuditService
from services.cause_service import CauseService
from schemas.cause import CauseCreate, CauseUpdate, CauseFilter

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


# --------------------------
# 1️⃣ Listing
# --------------------------

@router.get("/causes")
async def list_causes(
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        search: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        status: Optional[str] = Query(None),
        admin: User = Depends(admin_only),
        db: AsyncSession = Depends(get_db)
):
    filters = CauseFilter(search=search, category=category, status=status)
    result = await CauseService(db).list_causes(filters, page, limit)
    return {"success": True, **result}


@router.get("/causes/{cause_id}")
async def get_cause(
        cause_id: int,
        admin: User = Depends(admin_only),
        db: AsyncSession = Depends(get_db)
):
    cause = await CauseService(db).get_cause(cause_id)
    return {"success": True, "data": CauseService.serialize(cause, include_creator=True)}


# --------------------------
# 2️⃣ Create / edit
# --------------------------

@router.post("/causes", status_code=status.HTTP_201_CREATED)
async def create_cause(
        data: CauseCreate,
        admin: User = Depends(admin_only),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
):
    cause = await CauseService(db, audit).create_cause(data, admin)
    return {
        "success": True,
        "message": "Cause created successfully",
        "data": CauseService.serialize(cause, include_creator=True)
    }


@router.put("/causes/{cause_id}")
async def update_cause(
        cause_id: int,
        data: CauseUpdate,
        admin: User = Depends(admin_only),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
):
    cause = await CauseService(db, audit).update_cause(cause_id, data, admin)
    return {
        "success": True,
        "message": "Cause updated successfully",
        "data": CauseService.serialize(cause, include_creator=True)
    }


# --------------------------
# 3️⃣ Delete / archive
# --------------------------

@router.delete("/causes/{cause_id}")
async def delete_cause(
        cause_id: int,
        admin: User = Depends(admin_only),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
):
    await CauseService(db, audit).delete_cause(cause_id, admin)
    return {"success": True, "message": "Cause deleted successfully"}


@router.patch("/causes/{cause_id}/archive")
async def toggle_archive(
        cause_id: int,
        admin: User = Depends(admin_only),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
):
    cause = await CauseService(db, audit).toggle_archive(cause_id, admin)
    status_value = cause.status.value
    return {
        "success": True,
        "message": f"Cause {'archived' if status_value == 'cancelled' else 'restored'} successfully",
        "data": CauseService.serialize(cause, include_creator=True)
    }
