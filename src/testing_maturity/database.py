"""Async database engine and session management."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from testing_maturity.core.models import Base
from testing_maturity.observability import get_logger
from testing_maturity.settings import Settings

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_database(settings: Settings) -> AsyncEngine:
    """Create the async engine and session factory.

    Args:
        settings: Service settings holding the database URL.

    Returns:
        The created AsyncEngine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    _engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )
    _session_factory = async_sessionmaker(
        _engine,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info("Database engine initialised", echo=settings.database_echo)
    return _engine


async def create_tables() -> None:
    """Create the leads and assessments tables if they do not exist."""
    if _engine is None:
        raise RuntimeError("Database not initialised. Call init_database() first.")
    async with _engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def close_database() -> None:
    """Dispose the engine and its connection pool."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    The session is not committed here. Writers commit explicitly so that a
    request that fails part-way leaves nothing behind.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialised. Call init_database() first.")
    async with _session_factory() as session:
        yield session
