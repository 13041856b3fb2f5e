"""
PlaceShare Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── mock_db_session: Mock AsyncSession for service unit tests (no DB)
    ├── make_user / make_place: Transient ORM instances
    ├── db_engine: In-memory SQLite engine with the schema created
    ├── db_session: Session on db_engine for asserting on stored rows
    └── test_client: HTTPX AsyncClient talking to the app, wired to db_engine
"""

import os
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Must happen BEFORE any placeshare import: settings and the engine are
# built at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from placeshare.database import Base, get_db_session  # noqa: E402
from placeshare.models import Place, User  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_place(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = place
            result = await place_service.get_place(mock_db_session, place.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_user():
    """Factory for transient User instances with an empty place collection."""
    def _make(name: str = "Ada", email: str = None) -> User:
        return User(
            id=uuid.uuid4(),
            name=name,
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            places=[],
        )
    return _make


@pytest.fixture
def make_place():
    """Factory for transient Place instances, attached to `creator` when given."""
    def _make(creator: User = None, title: str = "Empire State Building") -> Place:
        place = Place(
            id=uuid.uuid4(),
            title=title,
            description="One of the most famous sky scrapers in the world!",
            address="20 W 34th St, New York, NY 10001",
            image="https://example.com/esb.jpg",
            lat=40.7484405,
            lng=-73.9878584,
            creator_id=creator.id if creator else uuid.uuid4(),
        )
        if creator is not None:
            # back_populates appends to creator.places
            place.creator = creator
        return place
    return _make


# ══════════════════════════════════════════════════════════════════════════
# Database-backed fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps the single in-memory connection alive across sessions,
    so every session in the test sees the same data.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    get_db_session is overridden to hand out sessions bound to db_engine,
    with the same commit/rollback behaviour as the production dependency.
    """
    from placeshare.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
