"""Repository interfaces.

Interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from warden.domain.repository.invite import InviteRepository
from warden.domain.repository.membership import MembershipRepository
from warden.domain.repository.transaction import TransactionManager
from warden.domain.repository.user import UserRepository
from warden.domain.repository.workspace import WorkspaceRepository

__all__ = [
    "InviteRepository",
    "MembershipRepository",
    "TransactionManager",
    "UserRepository",
    "WorkspaceRepository",
]
