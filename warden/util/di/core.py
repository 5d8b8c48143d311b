"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from warden.config import (
    AuthSettings,
    IdentitySettings,
    InvitationSettings,
    PlatformSettings,
    Settings,
)
from warden.domain.policy import AccessPolicy
from warden.domain.value import WorkspaceId
from warden.util.di.base import ProviderBase
from warden.util.error import ConfigurationError

_PLACEHOLDER_SECRET = "CHANGE_ME_IN_PRODUCTION"


def load_settings() -> Settings:
    """Load settings from the environment and refuse unsafe production ones.

    Raises:
        ConfigurationError: If production runs with placeholder secrets
    """
    settings = Settings()
    if settings.environment == "production":
        if settings.auth.jwt_secret == _PLACEHOLDER_SECRET:
            raise ConfigurationError("AUTH__JWT_SECRET must be set in production")
        if settings.identity.service_key == _PLACEHOLDER_SECRET:
            raise ConfigurationError("IDENTITY__SERVICE_KEY must be set in production")
    return settings


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        return load_settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_identity_settings(self, settings: Settings) -> IdentitySettings:
        return settings.identity

    @provide(scope=Scope.APP)
    def provide_platform_settings(self, settings: Settings) -> PlatformSettings:
        return settings.platform

    @provide(scope=Scope.APP)
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        return settings.invitations

    @provide(scope=Scope.APP)
    def provide_access_policy(self, platform: PlatformSettings) -> AccessPolicy:
        """Provide the role policy shared by edge, API and storage."""
        return AccessPolicy(platform_workspace_id=WorkspaceId(platform.workspace_id))
