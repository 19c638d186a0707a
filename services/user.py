# app/services/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fastapi import HTTPException
from typing import Dict, Any, List

from models.user import User, UserRole, DonationEntry
from services.audit_service import AuditService


class UserService:
    def __init__(self, db: AsyncSession, audit: AuditService = None):
        self.db = db
        self.audit = audit or AuditService(db)

    async def list_users(self) -> List[Dict[str, Any]]:
        """All users with donation totals taken from their ledgers."""
        totals = (
            select(
                DonationEntry.user_id,
                func.count(DonationEntry.id).label("donation_count"),
                func.coalesce(func.sum(DonationEntry.amount), 0).label("total_donated"),
            )
            .group_by(DonationEntry.user_id)
            .subquery()
        )
        result = await self.db.execute(
            select(User, totals.c.donation_count, totals.c.total_donated)
            .outerjoin(totals, totals.c.user_id == User.id)
            .order_by(User.created_at.desc(), User.id.desc())
        )

        return [
            {**self.serialize(user), "donationCount": count or 0, "totalDonated": total or 0}
            for user, count, total in result.all()
        ]

    async def get_user_detail(self, user_id: int) -> Dict[str, Any]:
        user = await self._get_user(user_id)
        result = await self.db.execute(
            select(DonationEntry).where(DonationEntry.user_id == user.id).order_by(DonationEntry.id.desc())
        )
        entries = result.scalars().all()

        return {
            **self.serialize(user),
            "profile": user.profile or {},
            "donations": [
                {
                    "amount": e.amount,
                    "cause": e.cause,
                    "causeId": e.cause_id,
                    "paymentId": e.payment_id,
                    "status": e.status,
                    "date": e.date,
                }
                for e in entries
            ],
        }

    async def change_role(self, user_id: int, new_role: UserRole, admin: User) -> User:
        if user_id == admin.id:
            raise HTTPException(status_code=400, detail="You cannot change your own role")

        user = await self._get_user(user_id)
        old_role = user.role
        user.role = new_role

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        await self.audit.log_user_role_changed(admin, user.id, user.email, old_role, new_role)
        return user

    @staticmethod
    def serialize(user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "email": user.email,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "age": user.age,
            "gender": user.gender,
            "role": user.role,
            "verified": user.verified,
            "createdAt": user.created_at,
        }

    async def _get_user(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user
