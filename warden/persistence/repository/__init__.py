"""PostgreSQL repository implementations."""

from warden.persistence.repository.invite import PostgresInviteRepository
from warden.persistence.repository.membership import PostgresMembershipRepository
from warden.persistence.repository.transaction import PostgresTransactionManager
from warden.persistence.repository.user import PostgresUserRepository
from warden.persistence.repository.workspace import PostgresWorkspaceRepository

__all__ = [
    "PostgresInviteRepository",
    "PostgresMembershipRepository",
    "PostgresTransactionManager",
    "PostgresUserRepository",
    "PostgresWorkspaceRepository",
]
