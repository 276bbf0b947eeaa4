"""
Async engine and session factory.

One engine per process. The default URL is a SQLite file next to the working
directory; every session checks out its own connection, so one request's
rollback never touches another request's transaction. Point DATABASE_URL at
PostgreSQL (postgresql+asyncpg://...) for a real connection pool.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from eventspot.core.config import get_settings
from eventspot.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # Writers queue on the database lock instead of failing with "database is locked"
        return {"connect_args": {"timeout": SQLITE_BUSY_TIMEOUT_SECONDS}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


def _enable_wal(dbapi_connection, connection_record) -> None:
    # Readers no longer block the writer that holds an event's inventory
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str) -> AsyncEngine:
    engine = create_async_engine(url, echo=settings.DEBUG, **_engine_options(url))
    if engine.dialect.name == "sqlite":
        if make_url(url).database in (None, "", ":memory:"):
            # All sessions would share one connection and one transaction
            logger.warning("sqlite_memory_database_shared_connection", url=url)
        event.listen(engine.sync_engine, "connect", _enable_wal)
    return engine


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_sessionmaker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.
    Commits when the handler returns, rolls back if it raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
