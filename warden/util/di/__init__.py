"""Dependency injection wiring.

``PROVIDERS`` lists every provider the API container installs, in order.
Swappable components (identity, persistence) appear as their base class
and are resolved to a production or mock subclass by ``get_provider``.
"""

from typing import Type

from warden.util.di.access import ProdAccessProvider
from warden.util.di.application import ProdApplicationProvider
from warden.util.di.base import Component, ProviderBase, get_provider
from warden.util.di.core import ProdConfigProvider
from warden.util.di.domain import ProdDomainProvider
from warden.util.di.infrastructure import (
    IdentityComponentProvider,
    PersistenceProvider,
    ProdIdentityProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdAccessProvider,
    ProdApplicationProvider,
    # swappable
    IdentityComponentProvider,
    PersistenceProvider,
]

__all__ = [
    "Component",
    "IdentityComponentProvider",
    "PROVIDERS",
    "PersistenceProvider",
    "ProdAccessProvider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdIdentityProvider",
    "ProdPersistenceProvider",
    "ProviderBase",
    "get_provider",
]
