"""Database configuration with async SQLAlchemy support."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from social_api.config import Settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def utc_now() -> datetime:
    """Current UTC time, the client-side default of every timestamp column.

    Stamped values share the format of bound datetimes; SQLite's
    ``CURRENT_TIMESTAMP`` drops fractional seconds.
    """
    return datetime.now(UTC)


def _is_memory_database(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """Turn on foreign key enforcement (and cascades) for every SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the pooled async engine described by the settings.

    PostgreSQL (and other server databases) get a bounded pool with
    timeout-bounded acquisition and pre-ping health checks. In-memory SQLite
    shares a single connection so every session sees the same database.
    """
    url = settings.database_url
    options: dict[str, Any] = {"echo": settings.debug}

    if _is_memory_database(url):
        options["poolclass"] = StaticPool
    elif not url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
        )

    engine = create_async_engine(url, **options)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory the storage layer opens transactions from."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables directly from the ORM metadata (tests and local dev)."""
    # Import models so every table is registered on the metadata
    import social_api.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
