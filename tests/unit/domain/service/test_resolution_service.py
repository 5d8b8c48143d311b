"""Unit tests for access resolution."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from warden.domain.error import StoreUnavailableError
from warden.domain.model import AdminGrant, InternalUser, StaffGrant
from warden.domain.model.common import utcnow
from warden.domain.repository import MembershipRepository, UserRepository
from warden.domain.service import ResolutionService, collect_candidates, select_candidate
from warden.domain.value import (
    AdminGrantId,
    Email,
    GrantSource,
    Role,
    StaffGrantId,
    UserId,
    WorkspaceId,
)
from tests.factory import (
    PLATFORM_WORKSPACE_ID,
    grant_admin,
    grant_staff,
    make_user,
    make_workspace,
    new_principal,
)
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


def _user(direct_role: Role | None = None) -> InternalUser:
    return InternalUser(
        id=UserId(uuid4()), email=Email("someone@example.com"), direct_role=direct_role
    )


def _admin(user: InternalUser, workspace_id=None, age_days: int = 0) -> AdminGrant:
    return AdminGrant(
        id=AdminGrantId(uuid4()),
        user_id=user.id,
        workspace_id=workspace_id,
        created_at=utcnow() - timedelta(days=age_days),
    )


def _staff(user: InternalUser, workspace_id, age_days: int = 0) -> StaffGrant:
    return StaffGrant(
        id=StaffGrantId(uuid4()),
        user_id=user.id,
        workspace_id=workspace_id,
        created_at=utcnow() - timedelta(days=age_days),
    )


class TestSelectCandidate:
    """Tests for the priority ordering of candidates."""

    def test_no_candidates_selects_nothing(self):
        """A user with no role source resolves to nothing."""
        assert select_candidate([]) is None

    def test_direct_role_beats_every_grant(self):
        """The direct platform_operator stamp outranks all grants."""
        # Arrange
        user = _user(direct_role=Role.PLATFORM_OPERATOR)
        workspace_id = WorkspaceId(uuid4())
        candidates = collect_candidates(
            user,
            [_admin(user, workspace_id, age_days=5)],
            [_staff(user, WorkspaceId(uuid4()), age_days=9)],
            PLATFORM_WORKSPACE_ID,
        )

        # Act
        winner = select_candidate(candidates)

        # Assert
        assert winner.source == GrantSource.DIRECT_ROLE
        assert winner.role == Role.PLATFORM_OPERATOR
        assert winner.workspace_id is None

    def test_platform_admin_grant_beats_workspace_admin_grant(self):
        """A null-workspace admin grant wins over an older workspace grant."""
        # Arrange
        user = _user()
        candidates = collect_candidates(
            user,
            [_admin(user, WorkspaceId(uuid4()), age_days=10), _admin(user, None)],
            [],
            PLATFORM_WORKSPACE_ID,
        )

        # Act
        winner = select_candidate(candidates)

        # Assert
        assert winner.source == GrantSource.PLATFORM_ADMIN_GRANT
        assert winner.role == Role.PLATFORM_OPERATOR

    def test_admin_grant_on_platform_workspace_is_platform_scope(self):
        """An admin grant naming the platform workspace acts as a null one."""
        # Arrange
        user = _user()

        # Act
        candidates = collect_candidates(
            user, [_admin(user, PLATFORM_WORKSPACE_ID)], [], PLATFORM_WORKSPACE_ID
        )

        # Assert
        assert candidates[0].source == GrantSource.PLATFORM_ADMIN_GRANT
        assert candidates[0].workspace_id is None

    def test_workspace_admin_beats_staff(self):
        """Admin grants outrank staff grants regardless of age."""
        # Arrange
        user = _user()
        workspace_id = WorkspaceId(uuid4())
        candidates = collect_candidates(
            user,
            [_admin(user, workspace_id)],
            [_staff(user, WorkspaceId(uuid4()), age_days=30)],
            PLATFORM_WORKSPACE_ID,
        )

        # Act
        winner = select_candidate(candidates)

        # Assert
        assert winner.role == Role.WORKSPACE_ADMIN
        assert winner.workspace_id == workspace_id

    def test_staff_on_platform_workspace_resolves_without_workspace(self):
        """Platform staff are reported with no workspace."""
        # Arrange
        user = _user()

        # Act
        winner = select_candidate(
            collect_candidates(
                user, [], [_staff(user, PLATFORM_WORKSPACE_ID)], PLATFORM_WORKSPACE_ID
            )
        )

        # Assert
        assert winner.role == Role.STAFF
        assert winner.workspace_id is None

    def test_tie_goes_to_earliest_grant(self):
        """Two staff grants of equal priority resolve to the older one."""
        # Arrange
        user = _user()
        older_workspace = WorkspaceId(uuid4())
        newer = _staff(user, WorkspaceId(uuid4()), age_days=1)
        older = _staff(user, older_workspace, age_days=3)

        # Act
        winner = select_candidate(
            collect_candidates(user, [], [newer, older], PLATFORM_WORKSPACE_ID)
        )

        # Assert
        assert winner.grant_id == older.id
        assert winner.workspace_id == older_workspace

    def test_tie_is_deterministic(self):
        """The same candidates in any order resolve to the same grant."""
        # Arrange
        user = _user()
        grants = [_admin(user, WorkspaceId(uuid4()), age_days=d) for d in (2, 7, 4)]

        # Act
        forward = select_candidate(
            collect_candidates(user, grants, [], PLATFORM_WORKSPACE_ID)
        )
        backward = select_candidate(
            collect_candidates(user, list(reversed(grants)), [], PLATFORM_WORKSPACE_ID)
        )

        # Assert
        assert forward == backward
        assert forward.grant_id == grants[1].id


class TestResolve:
    """Tests for ResolutionService.resolve against the store."""

    @pytest.mark.asyncio
    async def test_unknown_principal_is_unauthenticated(self, unit_env):
        """A principal with no user resolves to unauthenticated."""
        # Arrange
        service = await unit_env.get(ResolutionService)

        # Act
        record = await service.resolve(new_principal())

        # Assert
        assert not record.is_authenticated
        assert record.user_id is None
        assert record.workspace_id is None

    @pytest.mark.asyncio
    async def test_user_without_grants_is_unauthenticated(self, unit_env):
        """A provisioned user holding nothing resolves to unauthenticated."""
        # Arrange
        service = await unit_env.get(ResolutionService)
        principal_id = new_principal()
        await make_user(unit_env, "nobody@example.com", principal_id)

        # Act
        record = await service.resolve(principal_id)

        # Assert
        assert record.role is None

    @pytest.mark.asyncio
    async def test_platform_operator_grant(self, unit_env):
        """A null-workspace admin grant resolves to platform_operator."""
        # Arrange
        service = await unit_env.get(ResolutionService)
        principal_id = new_principal()
        user = await make_user(unit_env, "ops@example.com", principal_id)
        await grant_admin(unit_env, user, None)

        # Act
        record = await service.resolve(principal_id)

        # Assert
        assert record.role == Role.PLATFORM_OPERATOR
        assert record.workspace_id is None
        assert record.user_id == user.id
        assert record.source == GrantSource.PLATFORM_ADMIN_GRANT

    @pytest.mark.asyncio
    async def test_workspace_admin(self, unit_env):
        """A workspace admin grant resolves to that workspace."""
        # Arrange
        service = await unit_env.get(ResolutionService)
        principal_id = new_principal()
        user = await make_user(unit_env, "owner@example.com", principal_id)
        workspace = await make_workspace(unit_env, owner=user)
        await grant_admin(unit_env, user, workspace.id)

        # Act
        record = await service.resolve(principal_id)

        # Assert
        assert record.role == Role.WORKSPACE_ADMIN
        assert record.workspace_id == workspace.id

    @pytest.mark.asyncio
    async def test_staff(self, unit_env):
        """A staff grant resolves to staff of its workspace."""
        # Arrange
        service = await unit_env.get(ResolutionService)
        principal_id = new_principal()
        user = await make_user(unit_env, "staff@example.com", principal_id)
        workspace = await make_workspace(unit_env)
        await grant_staff(unit_env, user, workspace.id)

        # Act
        record = await service.resolve(principal_id)

        # Assert
        assert record.role == Role.STAFF
        assert record.workspace_id == workspace.id

    @pytest.mark.asyncio
    async def test_resolution_is_reused_within_a_request(self, unit_env):
        """Later grants are not seen until the principal is forgotten."""
        # Arrange
        service = await unit_env.get(ResolutionService)
        principal_id = new_principal()
        user = await make_user(unit_env, "late@example.com", principal_id)
        first = await service.resolve(principal_id)
        await grant_admin(unit_env, user, None)

        # Act
        cached = await service.resolve(principal_id)
        service.forget(principal_id)
        fresh = await service.resolve(principal_id)

        # Assert
        assert first.role is None
        assert cached.role is None
        assert fresh.role == Role.PLATFORM_OPERATOR


class _FailingUserRepository(UserRepository):
    async def find_by_id(self, user_id):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    async def find_by_principal_id(self, principal_id):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    async def find_by_email(self, email):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    async def save(self, user):
        raise OperationalError("INSERT", {}, Exception("connection refused"))


class _SlowUserRepository(_FailingUserRepository):
    async def find_by_principal_id(self, principal_id):
        await asyncio.sleep(1)
        return None


class TestResolveFailure:
    """Resolution fails closed when the store misbehaves."""

    @pytest.mark.asyncio
    async def test_store_error_raises_store_unavailable(self, unit_env):
        """A database error is reported, never read as 'no role'."""
        # Arrange
        service = ResolutionService(
            user_repository=_FailingUserRepository(),
            membership_repository=await unit_env.get(MembershipRepository),
            platform_workspace_id=PLATFORM_WORKSPACE_ID,
            timeout_seconds=1.0,
        )

        # Act & Assert
        with pytest.raises(StoreUnavailableError):
            await service.resolve(new_principal())

    @pytest.mark.asyncio
    async def test_timeout_raises_store_unavailable(self, unit_env):
        """A store slower than the timeout fails closed."""
        # Arrange
        service = ResolutionService(
            user_repository=_SlowUserRepository(),
            membership_repository=await unit_env.get(MembershipRepository),
            platform_workspace_id=PLATFORM_WORKSPACE_ID,
            timeout_seconds=0.01,
        )

        # Act & Assert
        with pytest.raises(StoreUnavailableError):
            await service.resolve(new_principal())

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(self, unit_env):
        """A failed resolution does not leave a record behind."""
        # Arrange
        service = ResolutionService(
            user_repository=_FailingUserRepository(),
            membership_repository=await unit_env.get(MembershipRepository),
            platform_workspace_id=PLATFORM_WORKSPACE_ID,
            timeout_seconds=1.0,
        )
        principal_id = new_principal()

        # Act
        with pytest.raises(StoreUnavailableError):
            await service.resolve(principal_id)

        # Assert
        assert principal_id not in service._resolved
