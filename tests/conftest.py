"""Shared test fixtures for the dealership CRM tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os
from datetime import datetime, timedelta

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app

# Import all models to ensure they're registered with Base.metadata
from app.models.audit_log import AuditLog  # noqa: F401
from app.models.category_limit import CategoryLimit  # noqa: F401
from app.models.customer import Customer  # noqa: F401
from app.models.enums import LeadStatus, UserRole
from app.models.lead import Lead
from app.models.user import User
from app.services.auth import create_user_token, hash_password


# Use aiosqlite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
TestSession = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with TestSession() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db():
    """Direct DB session for test setup/assertions."""
    async with TestSession() as session:
        yield session


@pytest.fixture
def session_factory():
    """Session factory for code that opens its own sessions (jobs, tasks)."""
    return TestSession


@pytest.fixture
def make_user(db):
    """Factory: create a user with the given role."""
    async def _make(role=UserRole.SALES, email=None, password="testpass123", **fields):
        user = User(
            name=fields.pop("name", f"{role.value.title()} User"),
            email=email or f"{role.value}@example.com",
            hashed_password=hash_password(password),
            role=role,
            is_active=True,
            **fields,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_user_token(user)}"}

    return _headers


@pytest.fixture
def make_lead(db):
    """Factory: create a lead last updated ``days_ago`` days ago."""
    async def _make(lead_name="Test Lead", days_ago=0, status=LeadStatus.NEW, is_active=True, now=None, **fields):
        updated_at = (now or datetime.utcnow()) - timedelta(days=days_ago)
        lead = Lead(
            lead_name=lead_name,
            status=status,
            is_active=is_active,
            created_at=updated_at,
            updated_at=updated_at,
            **fields,
        )
        db.add(lead)
        await db.commit()
        await db.refresh(lead)
        return lead

    return _make
