"""In-memory repositories sharing one store, used by tests."""

from .invite import InMemoryInviteRepository
from .membership import InMemoryMembershipRepository
from .store import InMemoryStore, InMemoryTransactionManager
from .user import InMemoryUserRepository
from .workspace import InMemoryWorkspaceRepository

__all__ = [
    "InMemoryInviteRepository",
    "InMemoryMembershipRepository",
    "InMemoryStore",
    "InMemoryTransactionManager",
    "InMemoryUserRepository",
    "InMemoryWorkspaceRepository",
]
