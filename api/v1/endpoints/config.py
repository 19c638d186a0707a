# app/api/v1/endpoints/config.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.dependencies import get_audit_service
from core.permissions import require_roles
from models.user import User, UserRole
from services.audit_service import AuditService
from services.config_service import ConfigService, CURRENCY_PRESETS
from schemas.config import PlatformConfigUpdate

router = APIRouter()


@router.get("")
async def get_config(db: AsyncSession = Depends(get_db)):
    config = await ConfigService(db).get_config()
    return {"success": True, "data": ConfigService.serialize(config)}


@router.put("")
async def update_config(
        data: PlatformConfigUpdate,
        admin: User = Depends(require_roles(UserRole.ADMIN)),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
):
    config = await ConfigService(db).update_config(data, admin)
    payload = ConfigService.serialize(config)
    await audit.log_config_updated(admin, data.model_dump(exclude_none=True, by_alias=True))
    return {
        "success": True,
        "message": "Platform configuration updated successfully",
        "data": payload
    }


@router.get("/currency-presets")
async def currency_presets():
    return {"success": True, "data": CURRENCY_PRESETS}
