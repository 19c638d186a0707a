from datetime import datetime
import logging

from fastapi import HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.security import hash_password, verify_password, create_access_token
from models.user import User, UserRole
from schemas.user import UserCreate, UserUpdate, TokenResponse, UserRead
from services.audit_service import AuditService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession, request: Request = None):
        self.db = db
        self.request = request
        self.audit = AuditService(db, request)

    # ------------------------------------------------
    # REGISTER
    # ------------------------------------------------
    async def register_user(self, data: UserCreate) -> User:
        email = data.email.lower()

        result = await self.db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            raise HTTPException(400, "User already exists")

        if len(data.password) < settings.MIN_PASSWORD_LENGTH:
            raise HTTPException(400, f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")

        user = User(
            email=email,
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            age=data.age,
            gender=data.gender,
            hashed_password=hash_password(data.password),
            role=UserRole.DONOR,
        )

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        await self.audit.log_user_registration(user.id, user.email)
        return user

    # ------------------------------------------------
    # LOGIN
    # ------------------------------------------------
    async def authenticate_user(self, email: str, password: str) -> User:
        email = email.lower()
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            await self.audit.log_login_failed(email, "Invalid credentials")
            raise HTTPException(401, "Invalid credentials")

        if not user.is_active:
            await self.audit.log_login_failed(email, "Account disabled")
            raise HTTPException(403, "Account disabled")

        user.last_login_at = datetime.utcnow()
        await self.db.commit()

        await self.audit.log_login_success(user.id, user.email)
        return user

    # ------------------------------------------------
    # TOKEN
    # ------------------------------------------------
    def create_token(self, user: User) -> TokenResponse:
        access = create_access_token(subject=user.id, extra_data={"role": user.role.value})
        return TokenResponse(access_token=access, user=UserRead.model_validate(user))

    # ------------------------------------------------
    # PROFILE
    # ------------------------------------------------
    async def update_profile(self, user: User, data: UserUpdate) -> User:
        updates = data.model_dump(exclude_unset=True, exclude={"profile"})
        for field, value in updates.items():
            if value is not None:
                setattr(user, field, value)

        if data.profile is not None:
            user.profile = data.profile.model_dump(by_alias=True)

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user
