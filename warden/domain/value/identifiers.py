"""Strongly typed identifiers for access entities.

NewType keeps user, workspace and grant ids from being mixed up while
costing nothing at runtime.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
WorkspaceId = NewType("WorkspaceId", UUID)
AdminGrantId = NewType("AdminGrantId", UUID)
StaffGrantId = NewType("StaffGrantId", UUID)
InviteId = NewType("InviteId", UUID)

# Opaque subject identifier issued by the external identity layer
PrincipalId = NewType("PrincipalId", str)
