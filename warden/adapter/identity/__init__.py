"""External identity layer adapter."""

from .client import HttpIdentityProviderClient, MockIdentityProviderClient

__all__ = ["HttpIdentityProviderClient", "MockIdentityProviderClient"]
