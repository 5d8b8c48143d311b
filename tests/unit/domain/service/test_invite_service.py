"""Unit tests for invite creation, revocation and listing."""

from datetime import timedelta
from uuid import uuid4

import pytest

from warden.domain.error import (
    AlreadyMemberError,
    InviteInvalidError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from warden.domain.model.common import utcnow
from warden.domain.service import InviteService
from warden.domain.value import (
    Email,
    InviteScope,
    InviteStatus,
    InviteToken,
    Role,
    WorkspaceId,
)
from tests.factory import (
    PLATFORM_WORKSPACE_ID,
    grant_staff,
    make_invite,
    make_operator,
    make_user,
    make_workspace,
    make_workspace_admin,
    new_principal,
)
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateInvite:
    """Tests for InviteService.create_invite."""

    @pytest.mark.asyncio
    async def test_operator_creates_platform_staff_invite(self, unit_env):
        """A platform operator can invite platform staff."""
        # Arrange
        service = await unit_env.get(InviteService)
        operator, principal_id = await make_operator(unit_env)

        # Act
        invite = await service.create_invite(
            principal_id, Email("analyst@platform.test"), Role.STAFF, InviteScope.platform()
        )

        # Assert
        assert invite.status == InviteStatus.PENDING
        assert invite.workspace_id is None
        assert invite.inviter_id == operator.id
        assert invite.role == Role.STAFF

    @pytest.mark.asyncio
    async def test_operator_creates_operator_invite(self, unit_env):
        """platform_operator may be offered at platform scope."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, principal_id = await make_operator(unit_env)

        # Act
        invite = await service.create_invite(
            principal_id,
            Email("second-ops@platform.test"),
            Role.PLATFORM_OPERATOR,
            InviteScope.platform(),
        )

        # Assert
        assert invite.role == Role.PLATFORM_OPERATOR
        assert invite.scope.is_platform

    @pytest.mark.asyncio
    async def test_token_has_enough_entropy_and_expires_in_thirty_days(self, unit_env):
        """Tokens are long random strings and invites last thirty days."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, principal_id = await make_operator(unit_env)
        before = utcnow()

        # Act
        first = await service.create_invite(
            principal_id, Email("a@platform.test"), Role.STAFF, InviteScope.platform()
        )
        second = await service.create_invite(
            principal_id, Email("b@platform.test"), Role.STAFF, InviteScope.platform()
        )

        # Assert
        # 32 random bytes encode to 43 url-safe characters
        assert len(first.token.root) >= 43
        assert first.token != second.token
        assert first.expires_at - first.created_at == timedelta(days=30)
        assert first.created_at >= before

    @pytest.mark.asyncio
    async def test_workspace_admin_invites_to_own_workspace(self, unit_env):
        """A workspace admin can invite staff into their own workspace."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, principal_id = await make_workspace_admin(unit_env)

        # Act
        invite = await service.create_invite(
            principal_id,
            Email("nurse@acme.test"),
            Role.STAFF,
            InviteScope.workspace(workspace.id),
        )

        # Assert
        assert invite.workspace_id == workspace.id
        assert invite.inviter_id == admin.id

    @pytest.mark.asyncio
    async def test_workspace_admin_cannot_invite_to_other_workspace(self, unit_env):
        """Scope comes from the resolved inviter, not from the request."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, _, principal_id = await make_workspace_admin(unit_env)
        other = await make_workspace(unit_env, name="Other Clinic")

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.create_invite(
                principal_id,
                Email("nurse@other.test"),
                Role.STAFF,
                InviteScope.workspace(other.id),
            )

    @pytest.mark.asyncio
    async def test_workspace_admin_cannot_create_platform_invite(self, unit_env):
        """Platform invites need a platform operator."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, _, principal_id = await make_workspace_admin(unit_env)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.create_invite(
                principal_id, Email("x@platform.test"), Role.STAFF, InviteScope.platform()
            )

    @pytest.mark.asyncio
    async def test_operator_cannot_create_workspace_invite(self, unit_env):
        """Workspace invites come from that workspace's administrator."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, principal_id = await make_operator(unit_env)
        workspace = await make_workspace(unit_env)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.create_invite(
                principal_id,
                Email("nurse@acme.test"),
                Role.STAFF,
                InviteScope.workspace(workspace.id),
            )

    @pytest.mark.asyncio
    async def test_staff_cannot_create_invites(self, unit_env):
        """Staff hold no invite operations."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace = await make_workspace(unit_env)
        principal_id = new_principal()
        staff = await make_user(unit_env, "staff@acme.test", principal_id)
        await grant_staff(unit_env, staff, workspace.id)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.create_invite(
                principal_id,
                Email("friend@acme.test"),
                Role.STAFF,
                InviteScope.workspace(workspace.id),
            )

    @pytest.mark.asyncio
    async def test_unknown_principal_is_unauthenticated(self, unit_env):
        """An inviter without access is rejected as unauthenticated."""
        # Arrange
        service = await unit_env.get(InviteService)

        # Act & Assert
        with pytest.raises(UnauthenticatedError):
            await service.create_invite(
                new_principal(), Email("x@acme.test"), Role.STAFF, InviteScope.platform()
            )

    @pytest.mark.asyncio
    async def test_platform_workspace_is_not_a_workspace_scope(self, unit_env):
        """Naming the platform workspace as a workspace scope is rejected."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, principal_id = await make_operator(unit_env)

        # Act & Assert
        with pytest.raises(ValidationError):
            await service.create_invite(
                principal_id,
                Email("x@platform.test"),
                Role.STAFF,
                InviteScope.workspace(PLATFORM_WORKSPACE_ID),
            )

    @pytest.mark.asyncio
    async def test_operator_role_cannot_be_offered_in_workspace(self, unit_env):
        """Workspace invites only offer staff."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, _, principal_id = await make_workspace_admin(unit_env)

        # Act & Assert
        with pytest.raises(ValidationError):
            await service.create_invite(
                principal_id,
                Email("boss@acme.test"),
                Role.PLATFORM_OPERATOR,
                InviteScope.workspace(workspace.id),
            )

    @pytest.mark.asyncio
    async def test_existing_member_cannot_be_invited(self, unit_env):
        """An invitee who already holds a grant is rejected up front."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, _, principal_id = await make_workspace_admin(unit_env)
        other = await make_workspace(unit_env, name="Other Clinic")
        member = await make_user(unit_env, "busy@elsewhere.test", new_principal())
        await grant_staff(unit_env, member, other.id)

        # Act & Assert
        with pytest.raises(AlreadyMemberError) as exc_info:
            await service.create_invite(
                principal_id,
                Email("Busy@Elsewhere.test"),
                Role.STAFF,
                InviteScope.workspace(workspace.id),
            )
        assert exc_info.value.reason == AlreadyMemberError.ALREADY_STAFF


class TestGetInvite:
    """Tests for InviteService.get_invite."""

    @pytest.mark.asyncio
    async def test_unknown_token(self, unit_env):
        """An unknown token is invalid."""
        # Arrange
        service = await unit_env.get(InviteService)

        # Act & Assert
        with pytest.raises(InviteInvalidError):
            await service.get_invite(InviteToken("no-such-token"))


class TestRevokeInvite:
    """Tests for InviteService.revoke_invite."""

    @pytest.mark.asyncio
    async def test_inviter_revokes_pending_invite(self, unit_env):
        """Revoking a pending invite moves it to revoked."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, principal_id = await make_workspace_admin(unit_env)
        invite = await make_invite(unit_env, admin, "nurse@acme.test", workspace_id=workspace.id)

        # Act
        revoked = await service.revoke_invite(invite.token, principal_id)

        # Assert
        assert revoked.status == InviteStatus.REVOKED
        stored = await service.get_invite(invite.token)
        assert stored.status == InviteStatus.REVOKED

    @pytest.mark.asyncio
    async def test_revoke_is_idempotent(self, unit_env):
        """Revoking twice succeeds and leaves the invite revoked."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, principal_id = await make_workspace_admin(unit_env)
        invite = await make_invite(unit_env, admin, "nurse@acme.test", workspace_id=workspace.id)
        await service.revoke_invite(invite.token, principal_id)

        # Act
        again = await service.revoke_invite(invite.token, principal_id)

        # Assert
        assert again.status == InviteStatus.REVOKED

    @pytest.mark.asyncio
    async def test_revoking_accepted_invite_changes_nothing(self, unit_env):
        """Accepted is terminal."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, principal_id = await make_workspace_admin(unit_env)
        invite = await make_invite(
            unit_env,
            admin,
            "nurse@acme.test",
            workspace_id=workspace.id,
            status=InviteStatus.ACCEPTED,
        )

        # Act
        result = await service.revoke_invite(invite.token, principal_id)

        # Assert
        assert result.status == InviteStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_revoking_expired_invite_changes_nothing(self, unit_env):
        """An expired invite stays pending in storage and reads as expired."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, principal_id = await make_workspace_admin(unit_env)
        invite = await make_invite(
            unit_env,
            admin,
            "late@acme.test",
            workspace_id=workspace.id,
            created_at=utcnow() - timedelta(days=31),
            expires_at=utcnow() - timedelta(days=1),
        )

        # Act
        result = await service.revoke_invite(invite.token, principal_id)

        # Assert
        assert result.status == InviteStatus.PENDING
        assert result.effective_status() == InviteStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_operator_revokes_any_invite(self, unit_env):
        """Platform scope covers every workspace's invites."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, _ = await make_workspace_admin(unit_env)
        _, operator_principal = await make_operator(unit_env)
        invite = await make_invite(unit_env, admin, "nurse@acme.test", workspace_id=workspace.id)

        # Act
        revoked = await service.revoke_invite(invite.token, operator_principal)

        # Assert
        assert revoked.status == InviteStatus.REVOKED

    @pytest.mark.asyncio
    async def test_other_workspace_admin_cannot_revoke(self, unit_env):
        """Another tenant's administrator may not touch the invite."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, _ = await make_workspace_admin(unit_env)
        _, _, other_principal = await make_workspace_admin(unit_env, "owner@other.test")
        invite = await make_invite(unit_env, admin, "nurse@acme.test", workspace_id=workspace.id)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.revoke_invite(invite.token, other_principal)

    @pytest.mark.asyncio
    async def test_staff_cannot_revoke(self, unit_env):
        """Staff of the same workspace may not revoke invites they did not send."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, _ = await make_workspace_admin(unit_env)
        staff_principal = new_principal()
        staff = await make_user(unit_env, "staff@acme.test", staff_principal)
        await grant_staff(unit_env, staff, workspace.id)
        invite = await make_invite(unit_env, admin, "nurse@acme.test", workspace_id=workspace.id)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.revoke_invite(invite.token, staff_principal)

    @pytest.mark.asyncio
    async def test_unknown_token(self, unit_env):
        """Revoking an unknown token reports it as invalid."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, _, principal_id = await make_workspace_admin(unit_env)

        # Act & Assert
        with pytest.raises(InviteInvalidError):
            await service.revoke_invite(InviteToken("missing"), principal_id)

    @pytest.mark.asyncio
    async def test_unauthenticated_caller(self, unit_env):
        """Revocation needs a resolved caller."""
        # Arrange
        service = await unit_env.get(InviteService)

        # Act & Assert
        with pytest.raises(UnauthenticatedError):
            await service.revoke_invite(InviteToken("anything"), new_principal())


class TestListInvites:
    """Tests for InviteService.list_invites."""

    @pytest.mark.asyncio
    async def test_workspace_admin_sees_only_own_workspace(self, unit_env):
        """Row scope hides other tenants and platform invites."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, principal_id = await make_workspace_admin(unit_env)
        other_ws, other_admin, _ = await make_workspace_admin(unit_env, "owner@other.test")
        operator, _ = await make_operator(unit_env)
        mine = await make_invite(unit_env, admin, "a@acme.test", workspace_id=workspace.id)
        await make_invite(unit_env, other_admin, "b@other.test", workspace_id=other_ws.id)
        await make_invite(unit_env, operator, "c@platform.test")

        # Act
        invites = await service.list_invites(principal_id)

        # Assert
        assert [i.id for i in invites] == [mine.id]

    @pytest.mark.asyncio
    async def test_operator_sees_everything(self, unit_env):
        """Platform scope lists every invite."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, _ = await make_workspace_admin(unit_env)
        operator, principal_id = await make_operator(unit_env)
        await make_invite(unit_env, admin, "a@acme.test", workspace_id=workspace.id)
        await make_invite(unit_env, operator, "c@platform.test")

        # Act
        invites = await service.list_invites(principal_id)

        # Assert
        assert len(invites) == 2

    @pytest.mark.asyncio
    async def test_status_filter_uses_effective_status(self, unit_env):
        """Expired invites are listed as expired, not pending."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace, admin, principal_id = await make_workspace_admin(unit_env)
        fresh = await make_invite(unit_env, admin, "fresh@acme.test", workspace_id=workspace.id)
        stale = await make_invite(
            unit_env,
            admin,
            "stale@acme.test",
            workspace_id=workspace.id,
            created_at=utcnow() - timedelta(days=40),
            expires_at=utcnow() - timedelta(days=10),
        )

        # Act
        pending = await service.list_invites(principal_id, status=InviteStatus.PENDING)
        expired = await service.list_invites(principal_id, status=InviteStatus.EXPIRED)

        # Assert
        assert [i.id for i in pending] == [fresh.id]
        assert [i.id for i in expired] == [stale.id]

    @pytest.mark.asyncio
    async def test_admin_cannot_list_other_workspace(self, unit_env):
        """Asking for another tenant's invites is refused."""
        # Arrange
        service = await unit_env.get(InviteService)
        _, _, principal_id = await make_workspace_admin(unit_env)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.list_invites(principal_id, workspace_id=WorkspaceId(uuid4()))

    @pytest.mark.asyncio
    async def test_staff_cannot_list(self, unit_env):
        """Staff hold no list operation."""
        # Arrange
        service = await unit_env.get(InviteService)
        workspace = await make_workspace(unit_env)
        principal_id = new_principal()
        staff = await make_user(unit_env, "staff@acme.test", principal_id)
        await grant_staff(unit_env, staff, workspace.id)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await service.list_invites(principal_id)
