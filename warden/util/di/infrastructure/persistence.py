"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from warden.config import Settings
from warden.domain.repository import (
    InviteRepository,
    MembershipRepository,
    TransactionManager,
    UserRepository,
    WorkspaceRepository,
)
from warden.persistence.database import create_engine, create_session_factory
from warden.persistence.repository import (
    PostgresInviteRepository,
    PostgresMembershipRepository,
    PostgresTransactionManager,
    PostgresUserRepository,
    PostgresWorkspaceRepository,
)
from warden.util.di.base import ProviderBase
from warden.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """PostgreSQL repositories sharing the request session."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the app container closes."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """One transaction per request.

        Committed when the request container closes cleanly. Any exception
        rolls back every write of the request, grants and invite claims
        included.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.debug("Request transaction committed")
            except Exception as e:
                logfire.warn(
                    "Request transaction rolled back", error_type=type(e).__name__
                )
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_transaction_manager(self, session: AsyncSession) -> TransactionManager:
        return PostgresTransactionManager(session)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_workspace_repository(self, session: AsyncSession) -> WorkspaceRepository:
        return PostgresWorkspaceRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_membership_repository(self, session: AsyncSession) -> MembershipRepository:
        """Provide grant repository."""
        return PostgresMembershipRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_invite_repository(self, session: AsyncSession) -> InviteRepository:
        return PostgresInviteRepository(session)
