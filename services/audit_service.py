# app/services/audit_service.py
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
import logging
import math

from fastapi import HTTPException, Request
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from models.audit_log import AuditLog, AuditEventType, AuditSeverity, AuditResourceType
from schemas.audit_log import AuditLogFilter, AuditLogRead

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = {
    "password", "token", "secret", "two_factor_secret",
    "access_token", "refresh_token", "hashed_password",
}


class AuditService:
    """Audit trail writer and reader. The create/log_* writers are fire-and-forget:
    failures are logged and never raised to the caller."""

    def __init__(self, db: AsyncSession, request: Optional[Request] = None):
        self.db = db
        self.request = request

    async def create_audit_log(
            self,
            event_type: AuditEventType,
            description: str,
            user_id: Optional[int] = None,
            user_email: Optional[str] = None,
            severity: AuditSeverity = AuditSeverity.INFO,
            metadata: Optional[Dict[str, Any]] = None,
            resource_type: Optional[AuditResourceType] = None,
            resource_id: Optional[Any] = None,
    ) -> None:
        try:
            log = AuditLog(
                event_type=event_type,
                description=description[:500],
                severity=severity,
                resource_type=resource_type,
                resource_id=str(resource_id) if resource_id is not None else None,
                ip_address=self._client_ip(),
                user_agent=self.request.headers.get("user-agent") if self.request else None,
                event_metadata=self._sanitize(metadata or {}),
                user_id=user_id,
                user_email=user_email,
            )
            self.db.add(log)
            await self.db.commit()
        except Exception as e:
            logger.error(f"Audit logging error ({event_type}): {e}")
            try:
                await self.db.rollback()
            except Exception:
                logger.exception("Audit logging rollback failed")

    # ---------- auth ----------
    async def log_user_registration(self, user_id: int, email: str):
        await self.create_audit_log(
            AuditEventType.USER_REGISTRATION,
            f"New user registered: {email}",
            user_id=user_id, user_email=email,
            resource_type=AuditResourceType.USER, resource_id=user_id,
        )

    async def log_login_success(self, user_id: int, email: str):
        await self.create_audit_log(
            AuditEventType.USER_LOGIN_SUCCESS,
            f"User logged in successfully: {email}",
            user_id=user_id, user_email=email,
            resource_type=AuditResourceType.USER, resource_id=user_id,
        )

    async def log_login_failed(self, email: str, reason: str):
        await self.create_audit_log(
            AuditEventType.USER_LOGIN_FAILED,
            f"Login failed for {email}: {reason}",
            user_email=email,
            severity=AuditSeverity.WARNING,
            metadata={"reason": reason},
            resource_type=AuditResourceType.USER,
        )

    # ---------- donations ----------
    async def log_donation_created(
            self, user_id: int, email: str, amount: float,
            cause_id: Any, cause_name: str, payment_id: str, payment_method: str,
    ):
        await self.create_audit_log(
            AuditEventType.DONATION_CREATED,
            f"Donation of {amount} made by {email} to {cause_name or 'cause'}",
            user_id=user_id, user_email=email,
            metadata={
                "amount": amount,
                "causeId": cause_id,
                "causeName": cause_name,
                "paymentId": payment_id,
                "paymentMethod": payment_method,
            },
            resource_type=AuditResourceType.DONATION,
            resource_id=payment_id,
        )

    async def log_donation_failed(
            self, user_id: int, email: str, amount: float,
            cause_id: Any, cause_name: str, reason: str,
    ):
        await self.create_audit_log(
            AuditEventType.DONATION_FAILED,
            f"Donation failed for {email}: {reason or 'Unknown error'}",
            user_id=user_id, user_email=email,
            severity=AuditSeverity.ERROR,
            metadata={
                "reason": reason,
                "amount": amount,
                "causeId": cause_id,
                "causeName": cause_name,
            },
            resource_type=AuditResourceType.DONATION,
        )

    # ---------- causes ----------
    async def log_cause_created(self, admin, cause):
        await self._log_cause(
            AuditEventType.CAUSE_CREATED, f"New cause created: {cause.name}", admin, cause,
            {"causeName": cause.name, "targetAmount": cause.target_amount, "category": _value(cause.category)},
        )

    async def log_cause_updated(self, admin, cause, changes: Dict[str, Any]):
        await self._log_cause(
            AuditEventType.CAUSE_UPDATED, f"Cause updated: {cause.name}", admin, cause,
            {"causeName": cause.name, "changes": changes},
        )

    async def log_cause_deleted(self, admin, cause_id: int, cause_name: str):
        await self.create_audit_log(
            AuditEventType.CAUSE_DELETED,
            f"Cause deleted: {cause_name}",
            user_id=admin.id, user_email=admin.email,
            severity=AuditSeverity.WARNING,
            metadata={"causeName": cause_name},
            resource_type=AuditResourceType.CAUSE,
            resource_id=cause_id,
        )

    async def log_cause_archived(self, admin, cause):
        await self._log_cause(
            AuditEventType.CAUSE_ARCHIVED,
            f"Cause status changed to {_value(cause.status)}: {cause.name}", admin, cause,
            {"causeName": cause.name, "status": _value(cause.status)},
        )

    # ---------- admin ----------
    async def log_user_role_changed(self, admin, target_user_id: int, target_email: str, old_role, new_role):
        await self.create_audit_log(
            AuditEventType.USER_ROLE_CHANGED,
            f"User role changed for {target_email}: {_value(old_role)} -> {_value(new_role)}",
            user_id=admin.id, user_email=admin.email,
            severity=AuditSeverity.WARNING,
            metadata={"targetUser": target_email, "oldRole": _value(old_role), "newRole": _value(new_role)},
            resource_type=AuditResourceType.USER,
            resource_id=target_user_id,
        )

    async def log_config_updated(self, admin, updates: Dict[str, Any]):
        await self.create_audit_log(
            AuditEventType.PLATFORM_CONFIG_UPDATED,
            "Platform configuration updated",
            user_id=admin.id, user_email=admin.email,
            metadata={"updates": updates},
            resource_type=AuditResourceType.CONFIG,
        )

    # ---------- reading ----------
    async def list_logs(self, filters: AuditLogFilter, page: int = 1, limit: int = 50) -> Dict[str, Any]:
        query = select(AuditLog)
        if filters.event_type:
            query = query.where(AuditLog.event_type == filters.event_type)
        if filters.severity:
            query = query.where(AuditLog.severity == filters.severity)
        if filters.resource_type:
            query = query.where(AuditLog.resource_type == filters.resource_type)
        if filters.user_email:
            query = query.where(AuditLog.user_email.ilike(f"%{filters.user_email}%"))
        if filters.start_date:
            query = query.where(AuditLog.created_at >= filters.start_date)
        if filters.end_date:
            query = query.where(AuditLog.created_at <= filters.end_date)

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))

        result = await self.db.execute(
            query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        logs = result.scalars().all()

        return {
            "logs": [AuditLogRead.model_validate(log).model_dump(by_alias=True) for log in logs],
            "pagination": {
                "total": total or 0,
                "page": page,
                "limit": limit,
                "totalPages": math.ceil(total / limit) if total else 0,
            },
        }

    async def get_log(self, log_id: int) -> AuditLog:
        log = await self.db.get(AuditLog, log_id)
        if not log:
            raise HTTPException(status_code=404, detail="Audit log not found")
        return log

    async def get_stats(self) -> Dict[str, Any]:
        by_type = await self.db.execute(
            select(AuditLog.event_type, func.count(AuditLog.id)).group_by(AuditLog.event_type)
        )
        by_severity = await self.db.execute(
            select(AuditLog.severity, func.count(AuditLog.id)).group_by(AuditLog.severity)
        )
        since = datetime.utcnow() - timedelta(hours=24)
        recent = await self.db.scalar(
            select(func.count(AuditLog.id)).where(AuditLog.created_at >= since)
        )
        total = await self.db.scalar(select(func.count(AuditLog.id)))

        return {
            "total": total or 0,
            "last24Hours": recent or 0,
            "byEventType": {t.value: c for t, c in by_type.all()},
            "bySeverity": {s.value: c for s, c in by_severity.all()},
        }

    # ---------- helpers ----------
    async def _log_cause(self, event_type, description, admin, cause, metadata):
        await self.create_audit_log(
            event_type, description,
            user_id=admin.id, user_email=admin.email,
            metadata=metadata,
            resource_type=AuditResourceType.CAUSE,
            resource_id=cause.id,
        )

    def _client_ip(self) -> Optional[str]:
        if not self.request:
            return None
        forwarded = self.request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return self.request.client.host if self.request.client else None

    @staticmethod
    def _sanitize(metadata: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in metadata.items() if k.lower() not in SENSITIVE_KEYS}


def _value(v):
    return getattr(v, "value", v)
