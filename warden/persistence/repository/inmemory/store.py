"""Shared state for the in-memory repositories."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from warden.domain.model import AdminGrant, InternalUser, Invite, StaffGrant, Workspace
from warden.domain.repository import TransactionManager
from warden.domain.value import (
    AdminGrantId,
    InviteId,
    StaffGrantId,
    UserId,
    WorkspaceId,
)


class InMemoryStore:
    """Tables for the in-memory repositories.

    All repositories of one container share a store, so the cross-table
    constraints (admin/staff mutual exclusion) can be checked like the
    database checks them. Writes are serialized by one lock; an atomic
    block snapshots the tables and restores them if the block fails.
    """

    def __init__(self) -> None:
        self.users: dict[UserId, InternalUser] = {}
        self.workspaces: dict[WorkspaceId, Workspace] = {}
        self.admin_grants: dict[AdminGrantId, AdminGrant] = {}
        self.staff_grants: dict[StaffGrantId, StaffGrant] = {}
        self.invites: dict[InviteId, Invite] = {}
        self._lock = asyncio.Lock()
        self._owner: asyncio.Task | None = None

    async def checkpoint(self) -> None:
        """Yield to the event loop, as a round-trip to a real store would."""
        await asyncio.sleep(0)

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        task = asyncio.current_task()
        if self._owner is task:
            # Nested block: the outermost one owns rollback
            yield
            return

        async with self._lock:
            self._owner = task
            snapshot = self._snapshot()
            try:
                yield
            except BaseException:
                self._restore(snapshot)
                raise
            finally:
                self._owner = None

    def _snapshot(self) -> tuple[dict, ...]:
        return (
            dict(self.users),
            dict(self.workspaces),
            dict(self.admin_grants),
            dict(self.staff_grants),
            dict(self.invites),
        )

    def _restore(self, snapshot: tuple[dict, ...]) -> None:
        (
            self.users,
            self.workspaces,
            self.admin_grants,
            self.staff_grants,
            self.invites,
        ) = snapshot


class InMemoryTransactionManager(TransactionManager):
    """Transaction manager backed by the store's snapshot/restore."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def atomic(self):
        return self.store.atomic()

    async def ping(self) -> None:
        await self.store.checkpoint()
