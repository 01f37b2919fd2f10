"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from pvz_service.app.main import app
from pvz_service.app.db.session import get_db, Base
from pvz_service.app.core.jwt import create_dummy_token
from pvz_service.app.domain.principal import Principal
from pvz_service.app.models.enums import UserRole

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
def override_db(session_factory):
    """Point the app's get_db dependency at the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for direct service calls and fixture data
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee_headers():
    return auth_headers(create_dummy_token(UserRole.EMPLOYEE))


@pytest.fixture
def moderator_headers():
    return auth_headers(create_dummy_token(UserRole.MODERATOR))


@pytest.fixture
def employee():
    return Principal(subject_id="00000000-0000-4000-8000-000000000001", role=UserRole.EMPLOYEE)


@pytest.fixture
def moderator():
    return Principal(subject_id="00000000-0000-4000-8000-000000000002", role=UserRole.MODERATOR)


@pytest.fixture
async def pvz_id(client, moderator_headers):
    """Pickup point created through the API."""
    response = await client.post("/pvz", json={"city": "Москва"}, headers=moderator_headers)
    assert response.status_code == 201
    return response.json()["id"]
