# app/scripts/seed_data.py
import asyncio
import os

from sqlalchemy import select

from core.database import AsyncSessionLocal, init_models
from core.security import hash_password
from models.cause import Cause, CauseCategory, CauseStatus
from models.user import User, UserRole, UserGender

# development credentials, override through the environment
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@donations.dev")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "Admin@123")

SAMPLE_CAUSES = [
    {
        "name": "Education for All",
        "description": "Supporting underprivileged children with quality education, school supplies, and learning resources.",
        "category": CauseCategory.EDUCATION,
        "target_amount": 5000,
    },
    {
        "name": "Healthcare Initiative",
        "description": "Providing medical care and health services to communities in need.",
        "category": CauseCategory.HEALTHCARE,
        "target_amount": 10000,
    },
    {
        "name": "Clean Water Project",
        "description": "Building wells and water purification systems for rural communities.",
        "category": CauseCategory.ENVIRONMENT,
        "target_amount": 7500,
    },
]


async def seed():
    await init_models()

    async with AsyncSessionLocal() as session:
        # 🔹 Admin
        result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
        admin = result.scalar_one_or_none()

        if not admin:
            admin = User(
                email=ADMIN_EMAIL,
                first_name="Admin",
                last_name="User",
                age=30,
                gender=UserGender.OTHER,
                hashed_password=hash_password(ADMIN_PASSWORD),
                role=UserRole.ADMIN,
                verified=True,
            )
            session.add(admin)
            await session.flush()
            print(f"✅ Admin created: {ADMIN_EMAIL}")
        else:
            admin.role = UserRole.ADMIN
            admin.verified = True
            print(f"⚠️ Admin already exists, role ensured: {ADMIN_EMAIL}")

        # 🔹 Causes
        for data in SAMPLE_CAUSES:
            exists = await session.scalar(select(Cause.id).where(Cause.name == data["name"]))
            if exists:
                print(f"⚠️ Cause already exists: {data['name']}")
                continue
            session.add(Cause(**data, status=CauseStatus.ACTIVE, created_by=admin.id))
            print(f"✅ Cause created: {data['name']}")

        await session.commit()

    print("\n" + "=" * 50)
    print("✅ Seeding finished")
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(seed())
