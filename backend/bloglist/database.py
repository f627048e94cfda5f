"""
Blog List Backend — Database Session Management
=================================================

What:  The one async engine, its session factory, and the per-request
       session dependency every blog/user route depends on.
How:   A request gets one session. It commits when the handler returns and
       rolls back when anything raises, so a rejected create or delete
       leaves no trace.

Pool (PostgreSQL via asyncpg):
    DB_POOL_SIZE / DB_MAX_OVERFLOW:  steady and burst connection counts
    DB_POOL_PRE_PING:                ping before checkout to drop dead sockets
    pool_recycle=3600:               reconnect hourly

    SQLite (used by the test suite) gets none of these: its async driver
    runs on a non-queue pool that rejects sizing arguments.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from bloglist.config import settings


def _engine_options() -> Dict[str, Any]:
    """Engine keyword arguments for the configured backend."""
    options: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: responses are built from rows after commit, and an
# expired attribute would need a lazy load that async sessions cannot do
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Declarative base for Blog and User.

    Registers every model with a single metadata object, which Alembic
    reads for migrations and the test suite uses for create_all().
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request: commit on success, rollback on any error.

    Example usage in a route:
        @router.get("/blogs")
        async def list_blogs(db: AsyncSession = Depends(get_db_session)):
            return await blog_service.list_blogs(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            # Roll back for ANY failure, including non-DB errors raised
            # after a write was flushed
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Close pooled connections on shutdown (called from the lifespan)."""
    await engine.dispose()
