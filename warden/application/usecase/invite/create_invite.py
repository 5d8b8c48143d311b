"""Create invite use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from warden.application.usecase.base import BaseUseCase
from warden.application.usecase.invite.common import InviteInfo
from warden.config import InvitationSettings
from warden.domain.error import UnauthenticatedError, ValidationError
from warden.domain.service import InviteService
from warden.domain.value import (
    Email,
    InviteScope,
    PrincipalId,
    Role,
    ScopeKind,
    WorkspaceId,
)


class CreateInviteRequest(BaseModel):
    """Create invite request.

    The scope is always explicit: ``workspace_id`` is required for
    workspace scope and forbidden for platform scope.
    """

    inviter_principal_id: str | None = None
    email: str
    role: Role = Role.STAFF
    scope: ScopeKind
    workspace_id: UUID | None = None


class CreateInviteResponse(BaseModel):
    """Create invite response.

    The token is returned only here, to the inviter, so the invite link
    can be delivered.
    """

    invite: InviteInfo
    token: str
    accept_url: str


class CreateInviteUseCase(BaseUseCase[CreateInviteRequest, CreateInviteResponse]):
    """Use case for inviting someone into the platform or a workspace."""

    def __init__(
        self, invite_service: InviteService, invitation_settings: InvitationSettings
    ) -> None:
        """Initialize create invite use case.

        Args:
            invite_service: Invite domain service
            invitation_settings: Link template
        """
        self.invite_service = invite_service
        self.invitation_settings = invitation_settings

    async def execute(self, request: CreateInviteRequest) -> CreateInviteResponse:
        """Create an invite.

        Raises:
            UnauthenticatedError: If the caller is not signed in
            UnauthorizedError: If the caller may not invite into the scope
            ValidationError: If the scope or role is malformed
            AlreadyMemberError: If the invitee already holds a grant
        """
        if request.inviter_principal_id is None:
            raise UnauthenticatedError()

        if request.scope == ScopeKind.PLATFORM:
            if request.workspace_id is not None:
                raise ValidationError("Platform invites must not name a workspace")
            scope = InviteScope.platform()
        else:
            if request.workspace_id is None:
                raise ValidationError("Workspace invites must name a workspace")
            scope = InviteScope.workspace(WorkspaceId(request.workspace_id))

        invite = await self.invite_service.create_invite(
            PrincipalId(request.inviter_principal_id),
            Email(request.email),
            request.role,
            scope,
        )

        accept_url = self.invitation_settings.accept_url_template.format(
            token=invite.token.root
        )
        logfire.info("Invite link built", token=invite.token.fingerprint)
        return CreateInviteResponse(
            invite=InviteInfo.from_invite(invite),
            token=invite.token.root,
            accept_url=accept_url,
        )
