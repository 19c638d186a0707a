# app/api/v1/endpoints/donation.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, Dict, Any

from core.database import get_db
from core.dependencies import get_fault_injector, get_audit_service
from core.permissions import get_current_user
from models.user import User
from services.audit_service import AuditService
from services.cause_service import CauseService
from services.donation_service import DonationService, FaultHook
from schemas.donation import DonationCreate, MultiDonationCreate

router = APIRouter()


# --------------------------
# 1️⃣ Causes visible to donors
# --------------------------

@router.get("/causes")
async def list_causes(
        status: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """Active causes by default"""
    causes = await DonationService(db).list_causes(status, category)
    return {
        "success": True,
        "count": len(causes),
        "data": [CauseService.serialize(c) for c in causes]
    }


@router.get("/causes/{cause_id}")
async def get_cause(
        cause_id: int,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """Single cause, without creator details"""
    cause = await CauseService(db).get_cause(cause_id)
    return {"success": True, "data": CauseService.serialize(cause)}


@router.get("/categories")
async def list_categories(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    """Categories that currently have at least one cause"""
    return {"success": True, "data": await DonationService(db).list_categories()}


# --------------------------
# 2️⃣ Donating
# --------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
async def donate(
        donation_data: DonationCreate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
        fault_hook: Optional[FaultHook] = Depends(get_fault_injector),
) -> Dict[str, Any]:
    """Donate to a single cause"""
    service = DonationService(db, audit)
    result = await service.donate(
        current_user,
        donation_data.cause_id,
        donation_data.amount,
        payment_id=donation_data.payment_id,
        payment_method=donation_data.payment_method,
        fault_hook=fault_hook,
    )
    return {
        "success": True,
        "message": "Donation successful! Thank you for your contribution.",
        "data": result
    }


@router.post("/multi", status_code=status.HTTP_201_CREATED)
async def donate_multi(
        donation_data: MultiDonationCreate,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
        fault_hook: Optional[FaultHook] = Depends(get_fault_injector),
) -> Dict[str, Any]:
    """Split one donation across several causes"""
    service = DonationService(db, audit)
    result = await service.donate_multi(
        current_user,
        donation_data.total_amount,
        donation_data.causes,
        payment_method=donation_data.payment_method,
        payment_id=donation_data.payment_id,
        fault_hook=fault_hook,
    )
    return {
        "success": True,
        "message": f"Successfully donated to {result['causesCount']} causes! Thank you for your contribution.",
        "data": result
    }


# --------------------------
# 3️⃣ Donor history
# --------------------------

@router.get("/history")
async def donation_history(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    return {"success": True, "data": await DonationService(db).get_history(current_user)}


@router.get("/stats")
async def donation_stats(
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    return {"success": True, "data": await DonationService(db).get_stats(current_user)}
