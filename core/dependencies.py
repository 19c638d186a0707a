from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from services.audit_service import AuditService
from services.donation_service import FaultHook


def get_fault_injector() -> Optional[FaultHook]:
    """Fault hook for the donation unit of work.

    Always None in the running service. Tests swap it in through
    ``app.dependency_overrides`` to force a failure between staging and commit;
    nothing in a request body can reach it.
    """
    return None


def get_audit_service(request: Request, db: AsyncSession = Depends(get_db)) -> AuditService:
    return AuditService(db, request)
