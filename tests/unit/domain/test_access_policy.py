"""Unit tests for the role policy table and its checks."""

from uuid import uuid4

import pytest

from warden.domain.error import UnauthenticatedError, UnauthorizedError
from warden.domain.model import AccessRecord
from warden.domain.policy import (
    ACCESS_POLICY,
    AccessPolicy,
    Operation,
    RowScope,
    RowScopeKind,
)
from warden.domain.value import GrantSource, Role, UserId, WorkspaceId
from tests.factory import PLATFORM_WORKSPACE_ID

WORKSPACE = WorkspaceId(uuid4())
OTHER_WORKSPACE = WorkspaceId(uuid4())

ANONYMOUS = AccessRecord.unauthenticated()
OPERATOR = AccessRecord(
    user_id=UserId(uuid4()), role=Role.PLATFORM_OPERATOR, source=GrantSource.DIRECT_ROLE
)
ADMIN = AccessRecord(
    user_id=UserId(uuid4()),
    role=Role.WORKSPACE_ADMIN,
    workspace_id=WORKSPACE,
    source=GrantSource.WORKSPACE_ADMIN_GRANT,
)
STAFF = AccessRecord(
    user_id=UserId(uuid4()),
    role=Role.STAFF,
    workspace_id=WORKSPACE,
    source=GrantSource.STAFF_GRANT,
)
PLATFORM_STAFF = AccessRecord(
    user_id=UserId(uuid4()), role=Role.STAFF, source=GrantSource.STAFF_GRANT
)


@pytest.fixture
def policy() -> AccessPolicy:
    return AccessPolicy(PLATFORM_WORKSPACE_ID)


class TestPolicyTable:
    """Tests for the shape of ACCESS_POLICY."""

    def test_every_role_has_an_entry(self):
        """No role falls through the table."""
        assert set(ACCESS_POLICY) == set(Role)

    def test_every_home_is_inside_its_own_area(self):
        """A role's landing page is a route it may open."""
        for role, entry in ACCESS_POLICY.items():
            assert any(entry.home.startswith(p) for p in entry.route_prefixes), role


class TestRouteDecision:
    """Tests for AccessPolicy.route_decision()."""

    @pytest.mark.parametrize(
        "record,path,allowed",
        [
            (OPERATOR, "/platform-admin", True),
            (OPERATOR, "/admin/dashboard", True),
            (OPERATOR, "/app/tasks", True),
            (ADMIN, "/admin/dashboard", True),
            (ADMIN, "/platform-admin", False),
            (ADMIN, "/app", False),
            (STAFF, "/app/tasks", True),
            (STAFF, "/admin/dashboard", False),
            (STAFF, "/platform-admin/users", False),
            (STAFF, "/account", True),
        ],
    )
    def test_role_areas(self, policy, record, path, allowed):
        """Each role reaches its own area and nothing above it."""
        decision = policy.route_decision(record, path)

        assert decision.allowed is allowed
        if not allowed:
            assert decision.redirect_to == "/unauthorized"

    def test_unauthenticated_is_sent_to_sign_in(self, policy):
        """Guarded areas need a session."""
        decision = policy.route_decision(ANONYMOUS, "/admin/dashboard")

        assert decision.allowed is False
        assert decision.redirect_to == "/login"
        assert decision.reason == "unauthenticated"

    def test_public_routes_are_open(self, policy):
        """Sign-in and invite pages never redirect."""
        for path in ("/login", "/invite", "/invite/abc", "/unauthorized"):
            assert policy.route_decision(ANONYMOUS, path).allowed

    def test_unguarded_paths_pass_through(self, policy):
        """Paths outside every area are left to the API layer."""
        decision = policy.route_decision(ANONYMOUS, "/health")

        assert decision.allowed is True
        assert decision.reason == "unguarded"

    def test_prefix_must_match_a_whole_segment(self, policy):
        """/application is not inside /app."""
        assert policy.route_decision(ANONYMOUS, "/application").allowed

    def test_root_sends_signed_in_users_home(self, policy):
        """The landing page redirects each role to its home."""
        assert policy.route_decision(ANONYMOUS, "/").allowed
        assert policy.route_decision(STAFF, "/").redirect_to == "/app"
        assert policy.route_decision(ADMIN, "/").redirect_to == "/admin/dashboard"
        assert policy.route_decision(OPERATOR, "/").redirect_to == "/platform-admin"


class TestRowScope:
    """Tests for AccessPolicy.row_scope()."""

    def test_operator_sees_all(self, policy):
        assert policy.row_scope(OPERATOR).kind == RowScopeKind.ALL

    def test_admin_sees_own_workspace(self, policy):
        scope = policy.row_scope(ADMIN)

        assert scope == RowScope.workspace(WORKSPACE)
        assert scope.allows(WORKSPACE)
        assert not scope.allows(OTHER_WORKSPACE)
        assert not scope.allows(None)

    def test_platform_staff_see_platform_workspace(self, policy):
        """Staff without a workspace are pinned to the platform workspace."""
        assert policy.row_scope(PLATFORM_STAFF) == RowScope.workspace(PLATFORM_WORKSPACE_ID)

    def test_anonymous_sees_nothing(self, policy):
        scope = policy.row_scope(ANONYMOUS)

        assert scope.kind == RowScopeKind.NONE
        assert not scope.allows(WORKSPACE)
        assert not scope.allows(None)


class TestAuthorize:
    """Tests for AccessPolicy.authorize()."""

    def test_anonymous_is_unauthenticated(self, policy):
        with pytest.raises(UnauthenticatedError):
            policy.authorize(ANONYMOUS, Operation.VIEW_ACCESS)

    def test_missing_operation_is_unauthorized(self, policy):
        with pytest.raises(UnauthorizedError):
            policy.authorize(STAFF, Operation.LIST_INVITES)

    def test_workspace_outside_scope_is_unauthorized(self, policy):
        with pytest.raises(UnauthorizedError):
            policy.authorize(ADMIN, Operation.LIST_STAFF, OTHER_WORKSPACE)

    def test_workspace_inside_scope_is_allowed(self, policy):
        policy.authorize(ADMIN, Operation.LIST_STAFF, WORKSPACE)

    def test_operator_cannot_create_workspace_invites(self, policy):
        """Only a workspace's own admin invites into it."""
        assert not policy.can(OPERATOR, Operation.CREATE_WORKSPACE_INVITE, WORKSPACE)
        assert policy.can(OPERATOR, Operation.CREATE_PLATFORM_INVITE)
