"""Membership grants linking users to workspaces."""

from datetime import datetime

from pydantic import Field

from warden.domain.model.common import DomainModel, utcnow
from warden.domain.value import AdminGrantId, StaffGrantId, UserId, WorkspaceId


class AdminGrant(DomainModel):
    """Administrative grant.

    A grant without a workspace is platform-wide (platform_operator). A grant
    on a real workspace makes the user its workspace_admin.

    Business rules:
    - At most one platform-wide and one workspace-scoped grant per user
    - A user holding an AdminGrant never holds a StaffGrant
    """

    id: AdminGrantId
    user_id: UserId
    workspace_id: WorkspaceId | None = None
    created_at: datetime = Field(default_factory=utcnow)


class StaffGrant(DomainModel):
    """Staff grant to exactly one workspace.

    Business rules:
    - At most one StaffGrant per user, ever
    - A user holding a StaffGrant never holds an AdminGrant
    """

    id: StaffGrantId
    user_id: UserId
    workspace_id: WorkspaceId
    created_at: datetime = Field(default_factory=utcnow)
