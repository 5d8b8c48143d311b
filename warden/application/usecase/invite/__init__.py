"""Invite use cases."""

from warden.application.usecase.invite.accept_invite import (
    AcceptInviteRequest,
    AcceptInviteResponse,
    AcceptInviteUseCase,
)
from warden.application.usecase.invite.common import InviteInfo
from warden.application.usecase.invite.create_invite import (
    CreateInviteRequest,
    CreateInviteResponse,
    CreateInviteUseCase,
)
from warden.application.usecase.invite.list_invites import (
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)
from warden.application.usecase.invite.preview_invite import (
    PreviewInviteRequest,
    PreviewInviteResponse,
    PreviewInviteUseCase,
)
from warden.application.usecase.invite.revoke_invite import (
    RevokeInviteRequest,
    RevokeInviteUseCase,
)

__all__ = [
    "AcceptInviteRequest",
    "AcceptInviteResponse",
    "AcceptInviteUseCase",
    "CreateInviteRequest",
    "CreateInviteResponse",
    "CreateInviteUseCase",
    "InviteInfo",
    "ListInvitesRequest",
    "ListInvitesResponse",
    "ListInvitesUseCase",
    "PreviewInviteRequest",
    "PreviewInviteResponse",
    "PreviewInviteUseCase",
    "RevokeInviteRequest",
    "RevokeInviteUseCase",
]
