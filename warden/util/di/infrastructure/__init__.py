"""Swappable infrastructure components.

Production subclasses are imported here so ``get_provider`` finds them
through ``__subclasses__()``.
"""

from .identity import IdentityComponentProvider, ProdIdentityProvider
from .persistence import PersistenceProvider, ProdPersistenceProvider

__all__ = [
    "IdentityComponentProvider",
    "PersistenceProvider",
    "ProdIdentityProvider",
    "ProdPersistenceProvider",
]
