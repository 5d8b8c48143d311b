"""Invite entity.

Invites offer a single email address a role in one scope: staff of a
workspace, or staff / platform_operator at platform scope.
"""

from datetime import datetime

from pydantic import Field, model_validator

from warden.domain.model.common import DomainModel, utcnow
from warden.domain.value import (
    Email,
    InviteId,
    InviteScope,
    InviteStatus,
    InviteToken,
    Role,
    UserId,
    WorkspaceId,
)


class Invite(DomainModel):
    """Invite entity.

    Business rules:
    - pending -> accepted, pending -> revoked, nothing leaves a terminal state
    - Expiry is derived at read time, the stored status stays pending
    - A null workspace_id means platform scope
    """

    id: InviteId
    token: InviteToken
    email: Email
    role: Role
    workspace_id: WorkspaceId | None = None
    inviter_id: UserId
    status: InviteStatus = InviteStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
    accepted_at: datetime | None = None
    accepted_by_user_id: UserId | None = None

    @model_validator(mode="after")
    def check_stored_status(self) -> "Invite":
        if self.status == InviteStatus.EXPIRED:
            raise ValueError("Expired is derived, it is never stored")
        if self.expires_at <= self.created_at:
            raise ValueError("Invite must expire after it was created")
        return self

    @property
    def scope(self) -> InviteScope:
        if self.workspace_id is None:
            return InviteScope.platform()
        return InviteScope.workspace(self.workspace_id)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) > self.expires_at

    def effective_status(self, now: datetime | None = None) -> InviteStatus:
        """Status as seen by a reader at ``now``.

        A pending invite past its expiry reads as expired.
        """
        if self.status == InviteStatus.PENDING and self.is_expired(now):
            return InviteStatus.EXPIRED
        return self.status
