"""Preview invite use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from warden.application.usecase.base import BaseUseCase
from warden.domain.model.common import utcnow
from warden.domain.service import InviteService
from warden.domain.service.invite_service import blocked_status_error
from warden.domain.value import InviteToken, Role, ScopeKind


class PreviewInviteRequest(BaseModel):
    """Preview invite request."""

    token: str


class PreviewInviteResponse(BaseModel):
    """What the accept page shows before the invitee commits."""

    email: str
    role: Role
    scope: ScopeKind
    workspace_id: str | None
    expires_at: datetime


class PreviewInviteUseCase(BaseUseCase[PreviewInviteRequest, PreviewInviteResponse]):
    """Use case for checking an invite link before acceptance.

    Reports unusable invites with the same errors acceptance would raise,
    so the accept page can show the specific message up front.
    """

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: PreviewInviteRequest) -> PreviewInviteResponse:
        """Preview an invite.

        Raises:
            InviteInvalidError: If the token is unknown or was revoked
            InviteAlreadyUsedError: If the invite was accepted
            InviteExpiredError: If the invite is past its expiry
        """
        token = InviteToken(root=request.token)
        invite = await self.invite_service.get_invite(token)

        blocked = blocked_status_error(invite, utcnow())
        if blocked is not None:
            logfire.info("Invite preview blocked", token=token.fingerprint, reason=blocked.code)
            raise blocked

        return PreviewInviteResponse(
            email=invite.email.root,
            role=invite.role,
            scope=invite.scope.kind,
            workspace_id=str(invite.workspace_id) if invite.workspace_id else None,
            expires_at=invite.expires_at,
        )
