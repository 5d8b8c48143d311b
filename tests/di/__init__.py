"""In-memory component providers for tests.

Importing this package registers the mock subclasses that
``get_provider`` selects.
"""

from .container import build_test_container
from .identity import MockIdentityProvider
from .persistence import MockPersistenceProvider

__all__ = [
    "MockIdentityProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
