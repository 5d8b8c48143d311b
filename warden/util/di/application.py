"""Application layer DI providers."""

from dishka import Scope, provide

from warden.application.usecase.access import CheckRouteUseCase, GetCurrentAccessUseCase
from warden.application.usecase.auth import SyncPrincipalUseCase
from warden.application.usecase.invite import (
    AcceptInviteUseCase,
    CreateInviteUseCase,
    ListInvitesUseCase,
    PreviewInviteUseCase,
    RevokeInviteUseCase,
)
from warden.application.usecase.workspace import (
    CreateWorkspaceUseCase,
    ListStaffUseCase,
)
from warden.config import InvitationSettings
from warden.domain.policy import AccessPolicy
from warden.domain.service import (
    InviteService,
    ResolutionService,
    UserService,
    WorkspaceService,
)
from warden.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Access use cases
    @provide(scope=Scope.REQUEST)
    def get_current_access_use_case(
        self, resolution_service: ResolutionService, access_policy: AccessPolicy
    ) -> GetCurrentAccessUseCase:
        """Provide get current access use case."""
        return GetCurrentAccessUseCase(
            resolution_service=resolution_service, access_policy=access_policy
        )

    @provide(scope=Scope.REQUEST)
    def get_check_route_use_case(
        self, resolution_service: ResolutionService, access_policy: AccessPolicy
    ) -> CheckRouteUseCase:
        """Provide check route use case."""
        return CheckRouteUseCase(
            resolution_service=resolution_service, access_policy=access_policy
        )

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_sync_principal_use_case(
        self, user_service: UserService
    ) -> SyncPrincipalUseCase:
        """Provide sync principal use case."""
        return SyncPrincipalUseCase(user_service=user_service)

    # Workspace use cases
    @provide(scope=Scope.REQUEST)
    def get_create_workspace_use_case(
        self,
        workspace_service: WorkspaceService,
        resolution_service: ResolutionService,
        access_policy: AccessPolicy,
    ) -> CreateWorkspaceUseCase:
        """Provide create workspace use case."""
        return CreateWorkspaceUseCase(
            workspace_service=workspace_service,
            resolution_service=resolution_service,
            access_policy=access_policy,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_staff_use_case(
        self, workspace_service: WorkspaceService
    ) -> ListStaffUseCase:
        """Provide list staff use case."""
        return ListStaffUseCase(workspace_service=workspace_service)

    # Invite use cases
    @provide(scope=Scope.REQUEST)
    def get_create_invite_use_case(
        self, invite_service: InviteService, invitation_settings: InvitationSettings
    ) -> CreateInviteUseCase:
        """Provide create invite use case."""
        return CreateInviteUseCase(
            invite_service=invite_service, invitation_settings=invitation_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_accept_invite_use_case(
        self, invite_service: InviteService, access_policy: AccessPolicy
    ) -> AcceptInviteUseCase:
        """Provide accept invite use case."""
        return AcceptInviteUseCase(
            invite_service=invite_service, access_policy=access_policy
        )

    @provide(scope=Scope.REQUEST)
    def get_revoke_invite_use_case(
        self, invite_service: InviteService
    ) -> RevokeInviteUseCase:
        """Provide revoke invite use case."""
        return RevokeInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_preview_invite_use_case(
        self, invite_service: InviteService
    ) -> PreviewInviteUseCase:
        """Provide preview invite use case."""
        return PreviewInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_list_invites_use_case(
        self, invite_service: InviteService
    ) -> ListInvitesUseCase:
        """Provide list invites use case."""
        return ListInvitesUseCase(invite_service=invite_service)
