"""
Database Infrastructure
=======================

Engine, session factory and schema bootstrap for the relational store.

PostgreSQL through asyncpg in deployment. Tests and local runs may point
``database_url`` at ``sqlite+aiosqlite``; connection pool sizing only
applies to server databases.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from helpdesk.config import settings


class Base(DeclarativeBase):
    """Declarative base shared by the accounts and tickets models."""


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp column.

    Values are normalized to UTC on the way in. Backends that drop the
    offset (SQLite) hand back naive values, which are re-tagged as UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


# Process-wide engine and session factory, set by init_database()
_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None

_NOT_INITIALIZED = "Database not initialized. Call init_database() first."

# Integer primary keys are int4 on PostgreSQL
MAX_ROW_ID = 2**31 - 1


def is_storable_id(value: int) -> bool:
    """True when ``value`` fits an integer primary key column."""
    return 1 <= value <= MAX_ROW_ID


def get_engine() -> AsyncEngine:
    """
    Return the engine created by ``init_database``.

    Raises:
        RuntimeError: init_database() has not run yet
    """
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def init_database(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the engine and session factory.

    Called once from the application lifespan; tests and scripts call it
    with their own URL.

    Args:
        database_url: Overrides ``settings.database_url`` when given
    """
    global _engine, _session_maker

    # asyncpg spells the libpq ``sslmode`` option ``ssl``
    url = (database_url or settings.database_url).replace("sslmode=", "ssl=")

    engine_kwargs = {"echo": settings.debug, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )

    _engine = create_async_engine(url, **engine_kwargs)
    _session_maker = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,  # DTOs are built from rows after commit
        autoflush=False,
    )
    return _engine


async def close_database() -> None:
    """Dispose of pooled connections and forget the engine."""
    global _engine, _session_maker

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_maker = None


def _session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_maker is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _session_maker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session for ``Depends(get_session)``.

    Services commit or roll back their own unit of work; whatever is still
    open when the request fails is rolled back here.
    """
    async with _session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Session for code running outside a request (scripts, tests).

    Usage:
        async with get_session_context() as session:
            service = AuthService(SQLAlchemyUserRepository(session))
    """
    async with _session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """
    Create any missing tables.

    Development and test bootstrap only; deployed schemas are migrated.
    """
    # Register every model on Base.metadata
    import helpdesk.accounts.infrastructure.models  # noqa: F401
    import helpdesk.tickets.infrastructure.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
