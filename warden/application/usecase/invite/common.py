"""Invite information shared by the invite use cases."""

from datetime import datetime

from pydantic import BaseModel

from warden.domain.model import Invite
from warden.domain.model.common import utcnow
from warden.domain.value import InviteStatus, Role, ScopeKind


class InviteInfo(BaseModel):
    """Invite information for response.

    ``status`` is the effective status: a pending invite past its expiry
    reads as expired.
    """

    id: str
    email: str
    role: Role
    scope: ScopeKind
    workspace_id: str | None
    status: InviteStatus
    created_at: datetime
    expires_at: datetime
    accepted_at: datetime | None

    @classmethod
    def from_invite(cls, invite: Invite, now: datetime | None = None) -> "InviteInfo":
        return cls(
            id=str(invite.id),
            email=invite.email.root,
            role=invite.role,
            scope=invite.scope.kind,
            workspace_id=str(invite.workspace_id) if invite.workspace_id else None,
            status=invite.effective_status(now or utcnow()),
            created_at=invite.created_at,
            expires_at=invite.expires_at,
            accepted_at=invite.accepted_at,
        )
