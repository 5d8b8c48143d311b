"""InternalUser entity."""

from datetime import datetime

from pydantic import Field, field_validator

from warden.domain.model.common import DomainModel, utcnow
from warden.domain.value import Email, PrincipalId, Role, UserId


class InternalUser(DomainModel):
    """The service's own identity for an authenticated principal.

    Business rules:
    - One InternalUser per principal, and one per email (case-insensitive)
    - principal_id is only empty between invite acceptance and provisioning
    - The only role that may be stamped directly is platform_operator
    """

    id: UserId
    principal_id: PrincipalId | None = None
    email: Email
    direct_role: Role | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("direct_role")
    @classmethod
    def only_platform_operator_is_direct(cls, v: Role | None) -> Role | None:
        if v is not None and v != Role.PLATFORM_OPERATOR:
            raise ValueError("Only platform_operator can be assigned directly")
        return v
