"""Identity layer infrastructure providers."""

from dishka import Scope, provide

from warden.adapter.identity import HttpIdentityProviderClient
from warden.config import IdentitySettings
from warden.domain.service import IdentityProvider
from warden.util.di.base import ProviderBase


class IdentityComponentProvider(ProviderBase):
    """Identity layer component base."""

    __mock_component__ = "identity"


class ProdIdentityProvider(IdentityComponentProvider):
    """Production identity provider talking to the identity layer's admin API."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_provider(self, settings: IdentitySettings) -> IdentityProvider:
        return HttpIdentityProviderClient(settings=settings)
