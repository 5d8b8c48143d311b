"""Invite routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, status
from pydantic import BaseModel, SecretStr

from warden.application.usecase.invite import (
    AcceptInviteRequest,
    AcceptInviteResponse,
    AcceptInviteUseCase,
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
    InviteInfo,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
    PreviewInviteRequest,
    PreviewInviteResponse,
    PreviewInviteUseCase,
    RevokeInviteRequest,
    RevokeInviteUseCase,
)
from warden.domain.model import RequestIdentity
from warden.domain.value import InviteStatus, Role, ScopeKind

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


class CreateInviteAPIRequest(BaseModel):
    """API request for creating an invite."""

    email: str
    role: Role = Role.STAFF
    scope: ScopeKind
    workspace_id: UUID | None = None


class AcceptInviteAPIRequest(BaseModel):
    """API request for accepting an invite.

    Send ``password`` to create a new account. Signed-in callers send no
    password and accept with their session.
    """

    email: str
    password: SecretStr | None = None


@router.post(
    "", response_model=CreateInviteResponse, status_code=status.HTTP_201_CREATED
)
async def create_invite(
    request: CreateInviteAPIRequest,
    use_case: FromDishka[CreateInviteUseCase],
    identity: FromDishka[RequestIdentity],
) -> CreateInviteResponse:
    """Create an invite into the platform or one workspace."""
    return await use_case.execute(
        CreateInviteRequest(
            inviter_principal_id=identity.principal_id,
            email=request.email,
            role=request.role,
            scope=request.scope,
            workspace_id=request.workspace_id,
        )
    )


@router.get("", response_model=ListInvitesResponse)
async def list_invites(
    use_case: FromDishka[ListInvitesUseCase],
    identity: FromDishka[RequestIdentity],
    status_filter: InviteStatus | None = Query(default=None, alias="status"),
    workspace_id: UUID | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ListInvitesResponse:
    """List invites the caller's scope covers.

    Args:
        status_filter: Optional effective status (pending, accepted, expired, revoked)
        workspace_id: Optional narrowing to one workspace
        limit: Maximum number of results (1-100)
        offset: Number of results to skip
    """
    return await use_case.execute(
        ListInvitesRequest(
            principal_id=identity.principal_id,
            status=status_filter,
            workspace_id=workspace_id,
            limit=limit,
            offset=offset,
        )
    )


@router.get("/{token}", response_model=PreviewInviteResponse)
async def preview_invite(
    token: str, use_case: FromDishka[PreviewInviteUseCase]
) -> PreviewInviteResponse:
    """Check an invite link before accepting it."""
    return await use_case.execute(PreviewInviteRequest(token=token))


@router.post("/{token}/accept", response_model=AcceptInviteResponse)
async def accept_invite(
    token: str,
    request: AcceptInviteAPIRequest,
    use_case: FromDishka[AcceptInviteUseCase],
    identity: FromDishka[RequestIdentity],
) -> AcceptInviteResponse:
    """Accept an invite with a new password or the caller's session."""
    return await use_case.execute(
        AcceptInviteRequest(
            token=token,
            email=request.email,
            password=request.password,
            principal_id=identity.principal_id,
        )
    )


@router.post("/{token}/revoke", response_model=InviteInfo)
async def revoke_invite(
    token: str,
    use_case: FromDishka[RevokeInviteUseCase],
    identity: FromDishka[RequestIdentity],
) -> InviteInfo:
    """Revoke a pending invite. Revoking a settled invite is a no-op."""
    return await use_case.execute(
        RevokeInviteRequest(token=token, principal_id=identity.principal_id)
    )
