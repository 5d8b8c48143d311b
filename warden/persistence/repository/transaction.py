"""PostgreSQL transaction manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.repository import TransactionManager


class PostgresTransactionManager(TransactionManager):
    """Atomic blocks as SAVEPOINTs inside the request transaction.

    A failed block rolls back to its savepoint and leaves the outer
    transaction usable, so callers can recover from a constraint
    violation and keep querying.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        async with self.session.begin_nested():
            yield

    async def ping(self) -> None:
        await self.session.execute(text("SELECT 1"))
