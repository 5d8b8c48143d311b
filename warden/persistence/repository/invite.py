"""PostgreSQL implementation of Invite repository."""

from datetime import datetime

from sqlalchemy import and_, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import Invite
from warden.domain.policy import RowScope
from warden.domain.repository import InviteRepository
from warden.domain.value import InviteStatus, InviteToken, UserId, WorkspaceId
from warden.persistence.mappers import invite_to_dict, row_to_invite
from warden.persistence.scoping import narrowed_clause
from warden.persistence.tables import invites_table


class PostgresInviteRepository(InviteRepository):
    """PostgreSQL implementation of InviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _pending_unexpired(self, token: InviteToken, now: datetime):
        return and_(
            invites_table.c.token == token.root,
            invites_table.c.status == InviteStatus.PENDING.value,
            invites_table.c.expires_at >= now,
        )

    async def find_by_token(self, token: InviteToken) -> Invite | None:
        """Find an invite by its token.

        Args:
            token: Invite token to look up

        Returns:
            Invite if found, None otherwise
        """
        stmt = select(invites_table).where(invites_table.c.token == token.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def add(self, invite: Invite) -> Invite:
        stmt = insert(invites_table).values(**invite_to_dict(invite))
        await self.session.execute(stmt)
        await self.session.flush()
        return invite

    async def mark_accepted(
        self, token: InviteToken, user_id: UserId, accepted_at: datetime
    ) -> Invite | None:
        """Claim a pending invite.

        The status predicate makes this a compare-and-set: a concurrent
        claim blocks on the row lock, then matches nothing once the winner
        commits.
        """
        stmt = (
            update(invites_table)
            .where(self._pending_unexpired(token, accepted_at))
            .values(
                status=InviteStatus.ACCEPTED.value,
                accepted_at=accepted_at,
                accepted_by_user_id=user_id,
            )
            .returning(*invites_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def mark_revoked(self, token: InviteToken, now: datetime) -> Invite | None:
        stmt = (
            update(invites_table)
            .where(self._pending_unexpired(token, now))
            .values(status=InviteStatus.REVOKED.value)
            .returning(*invites_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def list_visible(
        self,
        scope: RowScope,
        now: datetime,
        status: InviteStatus | None = None,
        workspace_id: WorkspaceId | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        stmt = (
            select(invites_table)
            .where(narrowed_clause(scope, invites_table.c.workspace_id, workspace_id))
            .order_by(invites_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )

        # Effective status: pending splits into pending / expired by time
        if status == InviteStatus.PENDING:
            stmt = stmt.where(
                invites_table.c.status == InviteStatus.PENDING.value,
                invites_table.c.expires_at >= now,
            )
        elif status == InviteStatus.EXPIRED:
            stmt = stmt.where(
                invites_table.c.status == InviteStatus.PENDING.value,
                invites_table.c.expires_at < now,
            )
        elif status is not None:
            stmt = stmt.where(invites_table.c.status == status.value)

        result = await self.session.execute(stmt)
        return [row_to_invite(dict(row)) for row in result.mappings().all()]
