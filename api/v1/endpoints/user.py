# app/api/v1/endpoints/user.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.dependencies import get_audit_service
from core.permissions import require_roles
from models.user import User, UserRole
from services.audit_service import AuditService
from services.user import UserService
from schemas.user import RoleUpdate

router = APIRouter()


@router.get("")
async def list_users(
        admin: User = Depends(require_roles(UserRole.ADMIN)),
        db: AsyncSession = Depends(get_db)
):
    users = await UserService(db).list_users()
    return {"success": True, "count": len(users), "data": users}


@router.get("/{user_id}")
async def get_user(
        user_id: int,
        admin: User = Depends(require_roles(UserRole.ADMIN)),
        db: AsyncSession = Depends(get_db)
):
    return {"success": True, "data": await UserService(db).get_user_detail(user_id)}


@router.put("/{user_id}/role")
async def change_role(
        user_id: int,
        data: RoleUpdate,
        admin: User = Depends(require_roles(UserRole.ADMIN)),
        db: AsyncSession = Depends(get_db),
        audit: AuditService = Depends(get_audit_service),
):
    user = await UserService(db, audit).change_role(user_id, data.role, admin)
    return {
        "success": True,
        "message": f"User role updated to {user.role.value}",
        "data": UserService.serialize(user)
    }
