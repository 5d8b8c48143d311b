"""List invites use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from warden.application.usecase.base import BaseUseCase
from warden.application.usecase.invite.common import InviteInfo
from warden.domain.error import UnauthenticatedError
from warden.domain.model.common import utcnow
from warden.domain.service import InviteService
from warden.domain.value import InviteStatus, PrincipalId, WorkspaceId


class ListInvitesRequest(BaseModel):
    """List invites request."""

    principal_id: str | None = None
    status: InviteStatus | None = None
    workspace_id: UUID | None = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListInvitesResponse(BaseModel):
    """List invites response."""

    invites: list[InviteInfo]


class ListInvitesUseCase(BaseUseCase[ListInvitesRequest, ListInvitesResponse]):
    """Use case for listing the invites a caller's scope covers."""

    def __init__(self, invite_service: InviteService) -> None:
        self.invite_service = invite_service

    async def execute(self, request: ListInvitesRequest) -> ListInvitesResponse:
        if request.principal_id is None:
            raise UnauthenticatedError()

        invites = await self.invite_service.list_invites(
            PrincipalId(request.principal_id),
            request.status,
            WorkspaceId(request.workspace_id) if request.workspace_id else None,
            request.limit,
            request.offset,
        )
        now = utcnow()
        return ListInvitesResponse(
            invites=[InviteInfo.from_invite(invite, now) for invite in invites]
        )
