# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SENTRY_DSN", "")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Configures structlog; must be imported before any module binds its logger
from casestatus.main import create_app  # isort: skip

import casestatus.models  # noqa: F401  (registers every table)
from casestatus.api.auth_helpers import get_identity_provider
from casestatus.core.db import Base, get_db
from casestatus.core.stats import invalidate_stats
from casestatus.models.admin_schemas import IdentitySession
from tests.factories import AdminUserFactory, UserFactory
from tests.fakes import FakeIdentityProvider

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpass123"


@pytest.fixture(autouse=True)
def reset_stats_cache():
    """Dashboard stats are cached per process; start every test cold."""
    invalidate_stats()
    yield
    invalidate_stats()


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine):
    """Create fresh DB session for each test."""
    async_session_maker = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


def _build_app(db_session: AsyncSession):
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest_asyncio.fixture
async def client(db_session: AsyncSession):
    """Anonymous client: real session cookies, real access gate."""
    app = _build_app(db_session)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.test_app = app
        ac.db_session = db_session
        yield ac


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession):
    """A login identity that also has an administrator record."""
    user = await UserFactory.create(db_session, email=ADMIN_EMAIL, password=ADMIN_PASSWORD)
    await AdminUserFactory.create(db_session, user=user, full_name="Ana Admin")
    return user


@pytest_asyncio.fixture
async def admin_client(db_session: AsyncSession, admin_user):
    """Client whose identity provider always reports the administrator's session.

    The administrator registry is still the real one, so the gate runs its
    second step against the database.
    """
    app = _build_app(db_session)

    def override_get_identity_provider():
        return FakeIdentityProvider(
            session=IdentitySession(user_id=admin_user.id, email=admin_user.email)
        )

    app.dependency_overrides[get_identity_provider] = override_get_identity_provider

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.test_user = admin_user
        ac.db_session = db_session
        yield ac
