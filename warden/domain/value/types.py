"""Domain value objects for access resolution.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import hashlib
import re
from enum import Enum, IntEnum

from pydantic import SecretStr, field_validator, model_validator

from warden.domain.value.common import RootValueObject, ValueObject
from warden.domain.value.identifiers import PrincipalId, WorkspaceId

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Role(str, Enum):
    """Access role a principal resolves to."""

    PLATFORM_OPERATOR = "platform_operator"
    WORKSPACE_ADMIN = "workspace_admin"
    STAFF = "staff"


class GrantSource(IntEnum):
    """Where a resolution candidate came from.

    The integer value is the candidate's priority: lower wins.
    """

    DIRECT_ROLE = 1
    PLATFORM_ADMIN_GRANT = 2
    WORKSPACE_ADMIN_GRANT = 3
    STAFF_GRANT = 4


class InviteStatus(str, Enum):
    """Status of an invite.

    EXPIRED is never written to the store. It is derived when a pending
    invite is read after its expiry.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    REVOKED = "revoked"


class ScopeKind(str, Enum):
    """What an invite or grant is scoped to."""

    PLATFORM = "platform"
    WORKSPACE = "workspace"


class InviteScope(ValueObject):
    """Explicit target scope of an invite.

    Platform scope carries no workspace id. Workspace scope always does.
    Build instances with ``InviteScope.platform()`` or
    ``InviteScope.workspace(workspace_id)``.
    """

    kind: ScopeKind
    workspace_id: WorkspaceId | None = None

    @model_validator(mode="after")
    def check_workspace_matches_kind(self) -> "InviteScope":
        if self.kind == ScopeKind.PLATFORM and self.workspace_id is not None:
            raise ValueError("Platform scope must not name a workspace")
        if self.kind == ScopeKind.WORKSPACE and self.workspace_id is None:
            raise ValueError("Workspace scope requires a workspace id")
        return self

    @classmethod
    def platform(cls) -> "InviteScope":
        return cls(kind=ScopeKind.PLATFORM)

    @classmethod
    def workspace(cls, workspace_id: WorkspaceId) -> "InviteScope":
        return cls(kind=ScopeKind.WORKSPACE, workspace_id=workspace_id)

    @property
    def is_platform(self) -> bool:
        return self.kind == ScopeKind.PLATFORM


class Email(RootValueObject[str]):
    """Email address, normalized to lowercase.

    Normalizing on construction makes equality case-insensitive, so two
    Email values compare equal whenever the addresses match ignoring case.
    """

    @field_validator("root")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Strip, lowercase and sanity-check the address."""
        v = v.strip().lower()
        if len(v) > 320 or not _EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v


class InviteToken(RootValueObject[str]):
    """URL-safe invite token."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is not empty."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Token must be 1-255 characters")
        return v

    @property
    def fingerprint(self) -> str:
        """Short, non-reversible token reference that is safe to log."""
        return hashlib.sha256(self.root.encode()).hexdigest()[:8]


class InviteCredential(ValueObject):
    """Proof of identity presented when accepting an invite.

    Exactly one of the two is given: a new password for a principal that
    does not exist yet, or the principal of an already signed-in session.
    """

    password: SecretStr | None = None
    principal_id: PrincipalId | None = None

    @model_validator(mode="after")
    def check_exactly_one(self) -> "InviteCredential":
        if (self.password is None) == (self.principal_id is None):
            raise ValueError("Provide either a password or a signed-in session")
        if self.password is not None and len(self.password.get_secret_value()) < 8:
            raise ValueError("Password must be at least 8 characters")
        return self

    @classmethod
    def with_password(cls, password: str) -> "InviteCredential":
        return cls(password=SecretStr(password))

    @classmethod
    def with_session(cls, principal_id: PrincipalId) -> "InviteCredential":
        return cls(principal_id=principal_id)
