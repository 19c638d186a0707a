"""
Donation platform - test configuration and fixtures
"""
import os
from datetime import datetime
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the app reads its settings
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ.setdefault('LOG_LEVEL', 'WARNING')

from main import app
from core.database import get_db
from core.security import hash_password, create_access_token
from models import Base
from models.cause import Cause, CauseCategory, CauseStatus
from models.user import User, UserRole, UserGender

fake = Faker()

TEST_DATABASE_URL = 'sqlite+aiosqlite://'
TEST_PASSWORD = 'testpassword123'


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database and session for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(db: AsyncSession, role: UserRole = UserRole.DONOR) -> User:
    user = User(
        email=fake.unique.free_email(),
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        age=fake.random_int(min=18, max=80),
        gender=UserGender.OTHER,
        hashed_password=hash_password(TEST_PASSWORD),
        role=role,
        is_active=True,
        verified=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_cause(
        db: AsyncSession,
        target_amount: float = 1000,
        current_amount: float = 0,
        status: CauseStatus = CauseStatus.ACTIVE,
        end_date: datetime = None,
        name: str = None,
        category: CauseCategory = CauseCategory.EDUCATION,
) -> Cause:
    cause = Cause(
        name=name or f"{fake.unique.catch_phrase()} Fund",
        description=fake.sentence(),
        category=category,
        target_amount=target_amount,
        current_amount=current_amount,
        status=status,
        end_date=end_date,
    )
    db.add(cause)
    await db.commit()
    await db.refresh(cause)
    return cause


def bearer(user: User) -> dict:
    token = create_access_token(subject=user.id, extra_data={'role': user.role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def donor(db_session: AsyncSession) -> User:
    """Create a donor test user"""
    return await create_user(db_session)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    return await create_user(db_session, role=UserRole.ADMIN)


@pytest.fixture
def auth_headers(donor: User) -> dict:
    return bearer(donor)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return bearer(admin_user)
