# app/api/v1/router.py
from fastapi import APIRouter
from api.v1.endpoints import (
    # Authentication & Users
    auth,
    user,

    # Causes
    cause,
    admin,

    # Donations
    donation,

    # Platform
    config,
    audit_log,
)

api_router = APIRouter()

# ========== 1️⃣ Authentication & Users ==========
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(user.router, prefix="/admin/users", tags=["Admin - Users"])

# ========== 2️⃣ Causes ==========
api_router.include_router(cause.router, prefix="/causes", tags=["Causes"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin - Causes"])

# ========== 3️⃣ Donations ==========
api_router.include_router(donation.router, prefix="/donate", tags=["Donations"])

# ========== 4️⃣ Platform ==========
api_router.include_router(config.router, prefix="/config", tags=["Platform Config"])
api_router.include_router(audit_log.router, prefix="/audit-logs", tags=["Audit Logs"])
