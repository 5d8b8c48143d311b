"""Workspace entity."""

from datetime import datetime

from pydantic import Field

from warden.domain.model.common import DomainModel, utcnow
from warden.domain.value import UserId, WorkspaceId


class Workspace(DomainModel):
    """A tenant boundary.

    Workspaces are created at signup and never merge. The reserved platform
    workspace has no owner.
    """

    id: WorkspaceId
    name: str = Field(min_length=1, max_length=255)
    owner_id: UserId | None = None
    created_at: datetime = Field(default_factory=utcnow)
