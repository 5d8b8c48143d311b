"""In-memory invite repository for testing."""

from datetime import datetime

from sqlalchemy.exc import IntegrityError

from warden.domain.model import Invite
from warden.domain.policy import RowScope
from warden.domain.repository import InviteRepository
from warden.domain.value import InviteStatus, InviteToken, UserId, WorkspaceId

from .store import InMemoryStore


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of InviteRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def _get(self, token: InviteToken) -> Invite | None:
        for invite in self.store.invites.values():
            if invite.token == token:
                return invite
        return None

    async def find_by_token(self, token: InviteToken) -> Invite | None:
        await self.store.checkpoint()
        return self._get(token)

    async def add(self, invite: Invite) -> Invite:
        async with self.store.atomic():
            if self._get(invite.token) is not None:
                raise IntegrityError("Duplicate invite token", None, Exception())
            self.store.invites[invite.id] = invite
            return invite

    async def mark_accepted(
        self, token: InviteToken, user_id: UserId, accepted_at: datetime
    ) -> Invite | None:
        async with self.store.atomic():
            await self.store.checkpoint()
            invite = self._get(token)
            if not self._claimable(invite, accepted_at):
                return None
            accepted = invite.model_copy(
                update={
                    "status": InviteStatus.ACCEPTED,
                    "accepted_at": accepted_at,
                    "accepted_by_user_id": user_id,
                }
            )
            self.store.invites[accepted.id] = accepted
            return accepted

    async def mark_revoked(self, token: InviteToken, now: datetime) -> Invite | None:
        async with self.store.atomic():
            await self.store.checkpoint()
            invite = self._get(token)
            if not self._claimable(invite, now):
                return None
            revoked = invite.model_copy(update={"status": InviteStatus.REVOKED})
            self.store.invites[revoked.id] = revoked
            return revoked

    @staticmethod
    def _claimable(invite: Invite | None, now: datetime) -> bool:
        return (
            invite is not None
            and invite.status == InviteStatus.PENDING
            and invite.expires_at >= now
        )

    async def list_visible(
        self,
        scope: RowScope,
        now: datetime,
        status: InviteStatus | None = None,
        workspace_id: WorkspaceId | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        await self.store.checkpoint()
        invites = [
            i
            for i in self.store.invites.values()
            if scope.allows(i.workspace_id)
            and (workspace_id is None or i.workspace_id == workspace_id)
            and (status is None or i.effective_status(now) == status)
        ]
        invites.sort(key=lambda i: i.created_at, reverse=True)
        return invites[offset : offset + limit]
