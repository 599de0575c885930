from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from src.api.deps import get_db_session
from src.api.main import app
from src.domain import User
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import UserRole, UserStatus

from tests.utils import create_user


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that drive services directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the per-test database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)  # type: ignore
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
async def asker(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await create_user(
        session_factory, email="grace@example.com", full_name="Grace Asker", role=UserRole.ASKER
    )


@pytest.fixture()
async def other_asker(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await create_user(
        session_factory, email="tom@example.com", full_name="Tom Asker", role=UserRole.ASKER
    )


@pytest.fixture()
async def responder(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await create_user(
        session_factory,
        email="john@askline.org",
        full_name="Pastor John",
        role=UserRole.RESPONDER,
        expertise=["Biblical Studies", "Theology"],
    )


@pytest.fixture()
async def other_responder(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await create_user(
        session_factory,
        email="mary@askline.org",
        full_name="Sister Mary",
        role=UserRole.RESPONDER,
        expertise=["Counseling", "Pastoral"],
    )


@pytest.fixture()
async def inactive_responder(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await create_user(
        session_factory,
        email="david@askline.org",
        full_name="Elder David",
        role=UserRole.RESPONDER,
        status=UserStatus.INACTIVE,
        expertise=["Theology"],
    )


@pytest.fixture()
async def admin(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await create_user(
        session_factory, email="admin@askline.org", full_name="Admin", role=UserRole.ADMIN
    )
