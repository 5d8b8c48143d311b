"""Domain layer DI providers."""

from dishka import Scope, provide

from warden.config import AuthSettings, InvitationSettings, Settings
from warden.domain.policy import AccessPolicy
from warden.domain.repository import (
    InviteRepository,
    MembershipRepository,
    TransactionManager,
    UserRepository,
    WorkspaceRepository,
)
from warden.domain.service import (
    IdentityProvider,
    InviteService,
    JWTService,
    ResolutionService,
    UserService,
    WorkspaceService,
)
from warden.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    ResolutionService in particular must be per request: it remembers the
    records it resolved, and every surface in a request shares them.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_resolution_service(
        self,
        user_repository: UserRepository,
        membership_repository: MembershipRepository,
        access_policy: AccessPolicy,
        settings: Settings,
    ) -> ResolutionService:
        """Provide access resolution domain service."""
        return ResolutionService(
            user_repository=user_repository,
            membership_repository=membership_repository,
            platform_workspace_id=access_policy.platform_workspace_id,
            timeout_seconds=settings.resolution.timeout_seconds,
        )

    @provide
    def get_user_service(
        self, user_repository: UserRepository, transaction_manager: TransactionManager
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository, transaction_manager=transaction_manager
        )

    @provide
    def get_workspace_service(
        self,
        workspace_repository: WorkspaceRepository,
        membership_repository: MembershipRepository,
        transaction_manager: TransactionManager,
        user_service: UserService,
        resolution_service: ResolutionService,
        access_policy: AccessPolicy,
    ) -> WorkspaceService:
        """Provide workspace domain service."""
        return WorkspaceService(
            workspace_repository=workspace_repository,
            membership_repository=membership_repository,
            transaction_manager=transaction_manager,
            user_service=user_service,
            resolution_service=resolution_service,
            access_policy=access_policy,
        )

    @provide
    def get_invite_service(
        self,
        invite_repository: InviteRepository,
        membership_repository: MembershipRepository,
        transaction_manager: TransactionManager,
        user_service: UserService,
        resolution_service: ResolutionService,
        identity_provider: IdentityProvider,
        access_policy: AccessPolicy,
        invitation_settings: InvitationSettings,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            invite_repository=invite_repository,
            membership_repository=membership_repository,
            transaction_manager=transaction_manager,
            user_service=user_service,
            resolution_service=resolution_service,
            identity_provider=identity_provider,
            access_policy=access_policy,
            invitation_settings=invitation_settings,
        )
