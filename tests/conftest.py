"""
Pytest configuration and fixtures for refpoints tests
"""

import os

os.environ.setdefault("SECURITY__ACCESS_TOKEN_SECRET", "test-access-secret-0123456789abcdef")
os.environ.setdefault("SECURITY__REFRESH_TOKEN_SECRET", "test-refresh-secret-fedcba9876543210")
os.environ.setdefault("SECURITY__BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE__DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "dev")

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from refpoints import models  # noqa: F401
from refpoints.db import get_db_session
from refpoints.utils.cache import get_cache
from refpoints.web.app import app

# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_db_engine():
    """
    Create test database engine
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def test_session_maker(test_db_engine):
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(test_session_maker) -> AsyncGenerator[AsyncSession, None]:
    """
    Create test database session
    """
    async with test_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(autouse=True)
async def clear_cache():
    """Кеш настроек не должен переживать тест."""
    await get_cache().clear()
    yield
    await get_cache().clear()


@pytest.fixture(scope="function")
async def client(test_session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP-клиент поверх ASGI-приложения с тестовой БД."""

    async def override_session():
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Фабрика пользователей через настоящую регистрацию."""
    from refpoints.services.registration import RegistrationService

    service = RegistrationService()

    async def _make(email: str, password: str = "secret123", referral_code: str | None = None):
        registration = await service.register_user(db_session, email, password, referral_code)
        return registration.user

    return _make
