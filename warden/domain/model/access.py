"""Access resolution results."""

from datetime import datetime
from uuid import UUID

from pydantic import model_validator

from warden.domain.model.common import DomainModel
from warden.domain.value import GrantSource, PrincipalId, Role, UserId, WorkspaceId


class Candidate(DomainModel):
    """One way a user could resolve to a role, tagged with its priority."""

    source: GrantSource
    role: Role
    workspace_id: WorkspaceId | None = None
    created_at: datetime
    grant_id: UUID | None = None  # None for the direct role stamp

    @property
    def priority(self) -> int:
        return int(self.source)


class AccessRecord(DomainModel):
    """The single (role, workspace) a principal resolves to.

    Not persisted; recomputed for every request. ``role is None`` is the
    unauthenticated terminal state.

    Invariants:
    - unauthenticated records carry neither user nor workspace
    - platform_operator is never workspace-scoped
    - workspace_admin always is
    - staff without a workspace are platform-scoped staff
    """

    user_id: UserId | None = None
    role: Role | None = None
    workspace_id: WorkspaceId | None = None
    source: GrantSource | None = None

    @model_validator(mode="after")
    def check_role_scope(self) -> "AccessRecord":
        if self.role is None:
            if self.user_id is not None or self.workspace_id is not None:
                raise ValueError("Unauthenticated access carries no user or workspace")
            return self
        if self.user_id is None:
            raise ValueError("Resolved access requires a user")
        if self.role == Role.PLATFORM_OPERATOR and self.workspace_id is not None:
            raise ValueError("platform_operator is not scoped to a workspace")
        if self.role == Role.WORKSPACE_ADMIN and self.workspace_id is None:
            raise ValueError("workspace_admin requires a workspace")
        return self

    @classmethod
    def unauthenticated(cls) -> "AccessRecord":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.role is not None

    @property
    def is_platform_scope(self) -> bool:
        return self.is_authenticated and self.workspace_id is None


class RequestIdentity(DomainModel):
    """Who the current request's session token says the caller is.

    ``principal_id`` is None when the token is missing or fails
    verification.
    """

    principal_id: PrincipalId | None = None
    email: str | None = None

    @property
    def is_signed_in(self) -> bool:
        return self.principal_id is not None
