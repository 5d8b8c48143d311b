"""Domain value objects for access resolution."""

from warden.domain.value.identifiers import (
    AdminGrantId,
    InviteId,
    PrincipalId,
    StaffGrantId,
    UserId,
    WorkspaceId,
)
from warden.domain.value.types import (
    Email,
    GrantSource,
    InviteCredential,
    InviteScope,
    InviteStatus,
    InviteToken,
    Role,
    ScopeKind,
)

__all__ = [
    # Identifiers
    "AdminGrantId",
    "InviteId",
    "PrincipalId",
    "StaffGrantId",
    "UserId",
    "WorkspaceId",
    # Types
    "Email",
    "GrantSource",
    "InviteCredential",
    "InviteScope",
    "InviteStatus",
    "InviteToken",
    "Role",
    "ScopeKind",
]
