"""Row <-> domain model mappers.

asyncpg returns UUID objects, while some drivers and fixtures hand back
strings; ``_uuid`` accepts both.
"""

from typing import Any, Dict
from uuid import UUID

from warden.domain.model import (
    AdminGrant,
    InternalUser,
    Invite,
    StaffGrant,
    Workspace,
)
from warden.domain.value import (
    AdminGrantId,
    Email,
    InviteId,
    InviteStatus,
    InviteToken,
    PrincipalId,
    Role,
    StaffGrantId,
    UserId,
    WorkspaceId,
)


def _uuid(value: Any) -> UUID | None:
    if value is None:
        return None
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> InternalUser:
    return InternalUser(
        id=UserId(_uuid(row["id"])),
        principal_id=PrincipalId(row["principal_id"]) if row.get("principal_id") else None,
        email=Email(row["email"]),
        direct_role=Role(row["direct_role"]) if row.get("direct_role") else None,
        created_at=row["created_at"],
    )


def user_to_dict(user: InternalUser) -> Dict[str, Any]:
    return {
        "id": user.id,
        "principal_id": user.principal_id,
        "email": user.email.root,
        "direct_role": user.direct_role.value if user.direct_role else None,
        "created_at": user.created_at,
    }


def row_to_workspace(row: Dict[str, Any]) -> Workspace:
    owner_id = _uuid(row.get("owner_id"))
    return Workspace(
        id=WorkspaceId(_uuid(row["id"])),
        name=row["name"],
        owner_id=UserId(owner_id) if owner_id else None,
        created_at=row["created_at"],
    )


def workspace_to_dict(workspace: Workspace) -> Dict[str, Any]:
    return {
        "id": workspace.id,
        "name": workspace.name,
        "owner_id": workspace.owner_id,
        "created_at": workspace.created_at,
    }


def row_to_admin_grant(row: Dict[str, Any]) -> AdminGrant:
    workspace_id = _uuid(row.get("workspace_id"))
    return AdminGrant(
        id=AdminGrantId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        workspace_id=WorkspaceId(workspace_id) if workspace_id else None,
        created_at=row["created_at"],
    )


def admin_grant_to_dict(grant: AdminGrant) -> Dict[str, Any]:
    return {
        "id": grant.id,
        "user_id": grant.user_id,
        "workspace_id": grant.workspace_id,
        "created_at": grant.created_at,
    }


def row_to_staff_grant(row: Dict[str, Any]) -> StaffGrant:
    return StaffGrant(
        id=StaffGrantId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        workspace_id=WorkspaceId(_uuid(row["workspace_id"])),
        created_at=row["created_at"],
    )


def staff_grant_to_dict(grant: StaffGrant) -> Dict[str, Any]:
    return {
        "id": grant.id,
        "user_id": grant.user_id,
        "workspace_id": grant.workspace_id,
        "created_at": grant.created_at,
    }


def row_to_invite(row: Dict[str, Any]) -> Invite:
    """Convert database row to Invite domain model.

    Args:
        row: Database row as dict

    Returns:
        Invite domain model
    """
    workspace_id = _uuid(row.get("workspace_id"))
    accepted_by = _uuid(row.get("accepted_by_user_id"))
    return Invite(
        id=InviteId(_uuid(row["id"])),
        token=InviteToken(root=row["token"]),
        email=Email(row["email"]),
        role=Role(row["role"]),
        workspace_id=WorkspaceId(workspace_id) if workspace_id else None,
        inviter_id=UserId(_uuid(row["inviter_id"])),
        status=InviteStatus(row["status"]),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        accepted_at=row.get("accepted_at"),
        accepted_by_user_id=UserId(accepted_by) if accepted_by else None,
    )


def invite_to_dict(invite: Invite) -> Dict[str, Any]:
    """Convert Invite domain model to database dict.

    Args:
        invite: Invite domain model

    Returns:
        Column values
    """
    return {
        "id": invite.id,
        "token": invite.token.root,
        "email": invite.email.root,
        "role": invite.role.value,
        "workspace_id": invite.workspace_id,
        "inviter_id": invite.inviter_id,
        "status": invite.status.value,
        "created_at": invite.created_at,
        "expires_at": invite.expires_at,
        "accepted_at": invite.accepted_at,
        "accepted_by_user_id": invite.accepted_by_user_id,
    }
