# app/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import get_current_user
from models.user import User
from services.auth_service import AuthService
from schemas.user import UserCreate, UserLogin, UserRead, UserUpdate, TokenResponse

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, request: Request, db: AsyncSession = Depends(get_db)):
    service = AuthService(db, request)
    user = await service.register_user(user_data)
    return service.create_token(user)


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, request: Request, db: AsyncSession = Depends(get_db)):
    service = AuthService(db, request)
    user = await service.authenticate_user(email=data.email, password=data.password)
    return service.create_token(user)


# ---------- profile ----------

@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    return {
        "success": True,
        "data": {
            **UserRead.model_validate(current_user).model_dump(by_alias=True),
            "profile": current_user.profile or {},
        }
    }


@router.put("/profile")
async def update_profile(
        data: UserUpdate,
        request: Request,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    user = await AuthService(db, request).update_profile(current_user, data)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {
            **UserRead.model_validate(user).model_dump(by_alias=True),
            "profile": user.profile or {},
        }
    }
