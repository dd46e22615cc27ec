"""Integration test fixtures backed by in-memory SQLite."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from award_engine.api.app import create_app
from award_engine.api.dependencies import get_db_session
from award_engine.models import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for integration tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


STANDARD_RULE = {
    "award_name": "General Retail Industry Award",
    "classification": "standard",
    "penalty_rate_pct": "25",
    "overtime_threshold_hours": "7.6",
    "effective_from": "2024-01-01",
}

PAYG_RATE = {
    "rate_type": "payg-withholding",
    "name": "PAYG withholding 2024-25",
    "effective_from": "2024-07-01",
    "brackets": [
        {"threshold": "0", "rate": "0"},
        {"threshold": "18200", "rate": "0.16"},
        {"threshold": "45000", "rate": "0.30"},
        {"threshold": "135000", "rate": "0.37"},
        {"threshold": "190000", "rate": "0.45"},
    ],
}

SG_RATE = {
    "rate_type": "superannuation-guarantee",
    "name": "Superannuation guarantee 2024-25",
    "rate": "0.115",
    "effective_from": "2024-07-01",
    "effective_to": "2025-07-01",
}
