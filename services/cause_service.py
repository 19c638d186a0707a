# app/services/cause_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, update
from fastapi import HTTPException
from datetime import datetime
from typing import Optional, List, Dict, Any
import logging
import math

from models.cause import Cause, CauseStatus, CauseCategory, ARCHIVED_STATUSES
from models.user import User
from schemas.cause import CauseCreate, CauseUpdate, CauseFilter
from services.audit_service import AuditService

logger = logging.getLogger(__name__)

CATEGORY_LABELS = [
    {"value": "education", "label": "Education"},
    {"value": "healthcare", "label": "Healthcare"},
    {"value": "environment", "label": "Environment"},
    {"value": "disaster-relief", "label": "Disaster Relief"},
    {"value": "poverty", "label": "Poverty"},
    {"value": "animal-welfare", "label": "Animal Welfare"},
    {"value": "other", "label": "Other"},
]


class CauseService:
    def __init__(self, db: AsyncSession, audit: Optional[AuditService] = None):
        self.db = db
        self.audit = audit or AuditService(db)

    # ---------- public ----------
    async def list_public_causes(self, search: Optional[str] = None, category: Optional[str] = None) -> List[Cause]:
        """Active causes only, newest first."""
        query = select(Cause).where(Cause.status == CauseStatus.ACTIVE)
        query = self._apply_search(query, search)
        query = self._apply_category(query, category)

        result = await self.db.execute(query.order_by(Cause.created_at.desc(), Cause.id.desc()))
        return list(result.scalars().all())

    async def get_cause(self, cause_id: int) -> Cause:
        cause = await self.db.get(Cause, cause_id)
        if not cause:
            raise HTTPException(status_code=404, detail="Cause not found")
        return cause

    # ---------- admin ----------
    async def list_causes(self, filters: CauseFilter, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        query = select(Cause)
        query = self._apply_search(query, filters.search)
        query = self._apply_category(query, filters.category)

        # "archived" matches every non-active status
        if filters.status and filters.status.strip():
            if filters.status == "archived":
                query = query.where(Cause.status.in_(ARCHIVED_STATUSES))
            elif filters.status != "all":
                query = query.where(Cause.status == self._parse_enum(CauseStatus, filters.status, "status"))

        total = await self.db.scalar(select(func.count()).select_from(query.subquery()))

        offset = (page - 1) * limit
        result = await self.db.execute(
            query.order_by(Cause.created_at.desc(), Cause.id.desc()).offset(offset).limit(limit)
        )
        causes = result.scalars().all()

        return {
            "count": len(causes),
            "total": total or 0,
            "page": page,
            "totalPages": math.ceil(total / limit) if total else 0,
            "data": [self.serialize(c, include_creator=True) for c in causes],
        }

    async def create_cause(self, data: CauseCreate, admin: User) -> Cause:
        if not data.name or not data.description or not data.target_amount:
            raise HTTPException(status_code=400, detail="Name, description, and target amount are required")

        if data.target_amount <= 0:
            raise HTTPException(status_code=400, detail="Target amount must be greater than 0")

        await self._ensure_unique_name(data.name)

        cause = Cause(
            name=data.name,
            description=data.description,
            category=data.category or CauseCategory.OTHER,
            target_amount=data.target_amount,
            image_url=data.image_url or "",
            end_date=data.end_date,
            created_by=admin.id,
        )
        self.db.add(cause)
        await self.db.commit()
        await self.db.refresh(cause)

        await self.audit.log_cause_created(admin, cause)
        return cause

    async def update_cause(self, cause_id: int, data: CauseUpdate, admin: User) -> Cause:
        """Non-financial edit path: amounts and event counts are never touched here."""
        cause = await self.get_cause(cause_id)
        changes = data.model_dump(exclude_unset=True, mode="json")

        if data.target_amount is not None and data.target_amount <= 0:
            raise HTTPException(status_code=400, detail="Target amount must be greater than 0")

        if data.name and data.name != cause.name:
            await self._ensure_unique_name(data.name, exclude_id=cause.id)
            cause.name = data.name
        if data.description:
            cause.description = data.description
        if data.category:
            cause.category = data.category
        if data.target_amount is not None:
            cause.target_amount = data.target_amount
        if data.status:
            cause.status = data.status
        if "image_url" in data.model_fields_set:
            cause.image_url = data.image_url or ""
        if "end_date" in data.model_fields_set:
            cause.end_date = data.end_date

        self.db.add(cause)
        await self.db.commit()
        await self.db.refresh(cause)

        await self.audit.log_cause_updated(admin, cause, changes)
        return cause

    async def delete_cause(self, cause_id: int, admin: User) -> None:
        cause = await self.get_cause(cause_id)

        if cause.current_amount > 0:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete a cause that has received donations. Consider marking it as cancelled instead."
            )

        cause_name = cause.name
        await self.db.delete(cause)
        await self.db.commit()

        await self.audit.log_cause_deleted(admin, cause_id, cause_name)

    async def toggle_archive(self, cause_id: int, admin: User) -> Cause:
        """active -> cancelled, cancelled -> active, anything else -> cancelled."""
        cause = await self.get_cause(cause_id)

        if cause.status == CauseStatus.CANCELLED:
            cause.status = CauseStatus.ACTIVE
        else:
            cause.status = CauseStatus.CANCELLED

        self.db.add(cause)
        await self.db.commit()
        await self.db.refresh(cause)

        await self.audit.log_cause_archived(admin, cause)
        return cause

    async def complete_expired_causes(self, now: Optional[datetime] = None) -> int:
        """Mark active causes whose end date has passed as completed; returns how many changed."""
        now = now or datetime.utcnow()
        result = await self.db.execute(
            update(Cause)
            .where(
                Cause.status == CauseStatus.ACTIVE,
                Cause.end_date.is_not(None),
                Cause.end_date < now,
            )
            .values(status=CauseStatus.COMPLETED)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        if result.rowcount:
            logger.info(f"Auto-completed {result.rowcount} expired cause(s)")
        else:
            logger.info("No expired causes found to complete")
        return result.rowcount

    @staticmethod
    def serialize(cause: Cause, include_creator: bool = False) -> Dict[str, Any]:
        data = {
            "id": cause.id,
            "name": cause.name,
            "description": cause.description,
            "category": cause.category,
            "imageUrl": cause.image_url,
            "targetAmount": cause.target_amount,
            "currentAmount": cause.current_amount,
            "donorCount": cause.donation_event_count,
            "percentageAchieved": cause.percentage_achieved,
            "status": cause.status,
            "startDate": cause.start_date,
            "endDate": cause.end_date,
            "createdAt": cause.created_at,
            "updatedAt": cause.updated_at,
        }
        if include_creator:
            data["createdBy"] = cause.created_by
        return data

    # ---------- Helper Methods ----------
    async def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None):
        query = select(Cause.id).where(Cause.name == name)
        if exclude_id is not None:
            query = query.where(Cause.id != exclude_id)
        if await self.db.scalar(query):
            raise HTTPException(status_code=400, detail="A cause with this name already exists")

    @staticmethod
    def _apply_search(query, search: Optional[str]):
        if search and search.strip():
            term = f"%{search.strip()}%"
            query = query.where(or_(Cause.name.ilike(term), Cause.description.ilike(term)))
        return query

    def _apply_category(self, query, category: Optional[str]):
        if category and category.strip() and category != "all":
            query = query.where(Cause.category == self._parse_enum(CauseCategory, category.lower(), "category"))
        return query

    @staticmethod
    def _parse_enum(enum_cls, value: str, label: str):
        try:
            return enum_cls(value)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown cause {label}: {value}")
