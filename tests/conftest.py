"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Set test environment variables before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SENDGRID_API_KEY", "")

from social_api.api.deps import get_storage
from social_api.config import Settings, StorageConfig
from social_api.database import create_engine, create_schema, create_session_factory
from social_api.main import app
from social_api.models import User
from social_api.services.mailer import get_mailer
from social_api.store import Storage


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory SQLite database with the full schema."""
    engine = create_engine(Settings(database_url="sqlite+aiosqlite://"))
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessions(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return create_session_factory(engine)


@pytest.fixture
def storage(sessions: async_sessionmaker[AsyncSession]) -> Storage:
    """Storage aggregate over the test database."""
    return Storage(sessions, StorageConfig())


@pytest.fixture
def make_user(storage: Storage) -> Callable[..., Awaitable[User]]:
    """Factory creating users with unique-by-name defaults."""

    async def _make_user(name: str = "alice", password: str = "securepassword123") -> User:
        return await storage.users.create(
            username=name, email=f"{name}@example.com", password=password
        )

    return _make_user


@pytest.fixture
async def client(storage: Storage) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the test storage."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_mailer] = lambda: None
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
