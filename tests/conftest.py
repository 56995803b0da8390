"""
Pytest configuration and fixtures for testing
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("BASE_URL", "http://sho.rt")
os.environ.setdefault("ADMIN_EMAIL", "admin@quicklinks.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin123")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from auth import SessionContext
from database import Base
import models  # noqa: F401
from service import LinkService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


@pytest.fixture
async def test_db():
    """
    Isolated in-memory SQLite session for each test.

    The engine is created and disposed inside the test's event loop, so
    every test starts from empty tables.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def service(test_db):
    return LinkService(test_db)


@pytest.fixture
def session_for():
    """Build the SessionContext a request from this user would carry."""
    def build(user):
        return SessionContext(user_id=user.id, email=user.email, role=user.role)
    return build


@pytest.fixture
def client():
    """
    HTTP client bound to a fresh application store.

    Entering the client runs startup (tables + admin bootstrap); leaving it
    disposes the in-memory database.
    """
    from main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
