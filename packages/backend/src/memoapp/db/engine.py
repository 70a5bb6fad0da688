"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.

The same code runs on SQLite (sqlite+aiosqlite://) and PostgreSQL
(postgresql+asyncpg://); only MEMO_DATABASE_URL changes.
"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from memoapp.config import settings


def _engine_kwargs(url: str) -> dict:
    # SQLite pools don't take size/overflow arguments.
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 5, "max_overflow": 15}


# echo=True in dev to see SQL queries.
engine: AsyncEngine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_kwargs(settings.database_url),
)

# Session factory — each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables(bind: AsyncEngine) -> None:
    """Create all tables that don't exist yet (dev / SQLite convenience).

    Production PostgreSQL deployments use the Alembic migrations instead.
    """
    from memoapp.db.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
