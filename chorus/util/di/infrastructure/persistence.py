"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from chorus.adapter.realtime import TransactionalPublisher
from chorus.config import Settings
from chorus.domain.error import StorageError
from chorus.domain.repository import CommentRepository
from chorus.persistence.database import create_engine, create_session_factory
from chorus.persistence.repository import PostgresCommentRepository
from chorus.util.di.base import ProviderBase
from chorus.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Comment store component; mocked with the in-memory store in tests."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """PostgreSQL comment store.

    One REQUEST scope is one comment operation: an HTTP request or a single
    realtime message. Everything a cascade delete does therefore lands in
    one transaction.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()
        logfire.info("Database engine disposed")

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        outbox: TransactionalPublisher,
    ) -> AsyncIterator[AsyncSession]:
        """Session for one operation: committed on success, rolled back on error.

        Events published during the operation are held by the outbox and
        reach observers only after the commit succeeded.

        Raises:
            StorageError: If the commit fails (from scope exit)
        """
        async with session_factory() as session:
            outbox.defer()
            # dishka sends the exception that ended the scope, or None
            error = yield session

            if error is not None:
                await session.rollback()
                dropped = outbox.discard()
                logfire.warn(
                    "Comment operation rolled back",
                    error=str(error),
                    error_type=type(error).__name__,
                    events_dropped=dropped,
                )
                return

            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                dropped = outbox.discard()
                logfire.error(
                    "Comment operation commit failed",
                    error=str(e),
                    events_dropped=dropped,
                )
                raise StorageError("commit", str(e)) from e

        outbox.flush()

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self, session: AsyncSession) -> CommentRepository:
        return PostgresCommentRepository(session)
