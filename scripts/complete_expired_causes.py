# app/scripts/complete_expired_causes.py
"""Mark active causes whose end date has passed as completed. Meant for cron."""
import asyncio
import logging

from core.config import settings
from core.database import AsyncSessionLocal
from services.cause_service import CauseService

logging.basicConfig(level=settings.LOG_LEVEL.upper())


async def run() -> int:
    async with AsyncSessionLocal() as session:
        return await CauseService(session).complete_expired_causes()


if __name__ == "__main__":
    count = asyncio.run(run())
    print(f"✅ {count} expired cause(s) marked as completed")
