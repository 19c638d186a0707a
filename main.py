import logging

from fastapi import FastAPI, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.api_router import api_router
from core.config import settings
from core.database import get_db, init_models, ping
from core.exceptions import DonationError, donation_error_handler

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.APP_NAME,
    description="Donation platform API",
    version=settings.APP_VERSION
)

app.add_exception_handler(DonationError, donation_error_handler)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    """Create tables on boot"""
    await init_models()
    logger.info(f"{settings.APP_NAME} started (debug={settings.DEBUG})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"{settings.APP_NAME} shutting down")


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Server and database health"""
    try:
        await ping(db)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check database ping failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "database": "unreachable",
                "version": settings.APP_VERSION
            }
        )

    return {
        "status": "healthy",
        "database": "connected",
        "version": settings.APP_VERSION
    }
