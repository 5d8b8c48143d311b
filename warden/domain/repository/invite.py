"""Invite repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from warden.domain.model import Invite
from warden.domain.policy import RowScope
from warden.domain.value import InviteStatus, InviteToken, UserId, WorkspaceId


class InviteRepository(ABC):
    """Repository for Invite entity.

    State changes go through conditional writes so concurrent callers
    cannot both move the same invite out of pending.
    """

    @abstractmethod
    async def find_by_token(self, token: InviteToken) -> Invite | None:
        """Find an invite by token.

        Args:
            token: The invite token

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def add(self, invite: Invite) -> Invite:
        """Insert a new invite.

        Args:
            invite: The invite to insert

        Returns:
            The inserted invite

        Raises:
            IntegrityError: If the token is already taken
        """
        pass

    @abstractmethod
    async def mark_accepted(
        self, token: InviteToken, user_id: UserId, accepted_at: datetime
    ) -> Invite | None:
        """Move a pending, unexpired invite to accepted.

        Args:
            token: The invite token
            user_id: The user the invite was accepted by
            accepted_at: Acceptance time, also the expiry cut-off

        Returns:
            The accepted invite, or None if it was not pending and unexpired
        """
        pass

    @abstractmethod
    async def mark_revoked(self, token: InviteToken, now: datetime) -> Invite | None:
        """Move a pending, unexpired invite to revoked.

        Args:
            token: The invite token
            now: Expiry cut-off

        Returns:
            The revoked invite, or None if it was not pending and unexpired
        """
        pass

    @abstractmethod
    async def list_visible(
        self,
        scope: RowScope,
        now: datetime,
        status: InviteStatus | None = None,
        workspace_id: WorkspaceId | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        """List invites visible to a row scope.

        Platform-scoped invites are only visible to an unrestricted scope.

        Args:
            scope: Row scope of the caller
            now: Reference time for derived expiry
            status: Optional effective-status filter
            workspace_id: Optional narrowing to one workspace
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            Invites, newest first
        """
        pass
