"""Domain model entities."""

from warden.domain.model.access import AccessRecord, Candidate, RequestIdentity
from warden.domain.model.invite import Invite
from warden.domain.model.membership import AdminGrant, StaffGrant
from warden.domain.model.user import InternalUser
from warden.domain.model.workspace import Workspace

__all__ = [
    "AccessRecord",
    "AdminGrant",
    "Candidate",
    "InternalUser",
    "Invite",
    "RequestIdentity",
    "StaffGrant",
    "Workspace",
]
