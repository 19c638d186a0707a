# app/core/permissions.py
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import decode_token, oauth2_scheme
from models.user import User
import logging
logger = logging.getLogger(__name__)


async def get_current_user(
        token: Optional[str] = Depends(oauth2_scheme),
        db: AsyncSession = Depends(get_db),
) -> User:

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to access this route",
        )

    user_id = decode_token(token)
    try:
        user = await db.get(User, int(user_id))
    except ValueError:
        logger.warning(f"Malformed token subject: {user_id!r}")
        user = None

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def require_roles(*roles_allowed):
    async def wrapper(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles_allowed:
            raise HTTPException(
                status_code=403,
                detail=f"User role {user.role} is not authorized to access this route",
            )
        return user
    return wrapper
