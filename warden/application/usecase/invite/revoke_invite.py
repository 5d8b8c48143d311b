"""Revoke invite use case."""

from pydantic import BaseModel

from warden.application.usecase.base import BaseUseCase
from warden.application.usecase.invite.common import InviteInfo
from warden.domain.error import UnauthenticatedError
from warden.domain.service import InviteService
from warden.domain.value import InviteToken, PrincipalId


class RevokeInviteRequest(BaseModel):
    """Revoke invite request."""

    token: str
    principal_id: str | None = None


class RevokeInviteUseCase(BaseUseCase[RevokeInviteRequest, InviteInfo]):
    """Use case for cancelling a pending invite.

    Revoking an invite that is no longer pending succeeds and reports the
    invite's current status.
    """

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: RevokeInviteRequest) -> InviteInfo:
        if request.principal_id is None:
            raise UnauthenticatedError()

        invite = await self.invite_service.revoke_invite(
            InviteToken(root=request.token), PrincipalId(request.principal_id)
        )
        return InviteInfo.from_invite(invite)
