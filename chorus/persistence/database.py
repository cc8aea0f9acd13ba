"""Engine and session setup for the PostgreSQL comment store."""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from chorus.config import Settings

APPLICATION_NAME = "chorus"


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the comment store.

    Pool sizes come from ``DATABASE__POOL_SIZE`` and
    ``DATABASE__MAX_OVERFLOW``. Every realtime message and every HTTP request
    holds one connection for the length of its operation.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        # Shows up in pg_stat_activity
        connect_args={"server_settings": {"application_name": APPLICATION_NAME}},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the factory for per-operation sessions.

    Rows are mapped to frozen domain models right after each statement, so
    nothing needs to be refreshed after commit.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def comments_table_reachable(engine: AsyncEngine) -> bool:
    """Check that the database answers and the comments table exists."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM comments LIMIT 1"))
    except (OSError, SQLAlchemyError):
        return False
    return True
