"""
MangaBot Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock AsyncSession for service unit tests (no DB)
    ├── db_engine: Async engine on a temporary SQLite file, tables created
    ├── auth_headers: Authorization header with a valid bearer token
    └── test_client: HTTPX AsyncClient on a fresh app wired to db_engine
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="mangabot_test_"), "health.db"
)
os.environ["SECRET_KEY"] = "test-secret-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mangabot.database import Base, get_db_session  # noqa: E402
from mangabot.models.manga import Manga  # noqa: E402,F401
from mangabot.models.prestamo import Prestamo  # noqa: E402,F401
from mangabot.security import create_access_token  # noqa: E402


TEST_USER = "tester@example.com"


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_manga(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = manga
            result = await manga_service.get_manga(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": TEST_USER})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """A fresh SQLite database per test with every table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'mangabot.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


def _session_override(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db_session


@pytest.fixture
def make_app(db_engine):
    """Builds a fresh app whose session dependency uses db_engine."""
    from mangabot.main import create_app

    def _make():
        app = create_app()
        app.dependency_overrides[get_db_session] = _session_override(db_engine)
        return app

    return _make


@pytest_asyncio.fixture
async def test_client(make_app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_list(test_client, auth_headers):
            response = await test_client.get("/api/v1/manga", headers=auth_headers)
            assert response.status_code == 200
    """
    transport = ASGITransport(app=make_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
