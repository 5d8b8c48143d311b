"""Role to route, operation and row-scope mapping.

``ACCESS_POLICY`` is the only place that says what each role may reach.
The edge router, the API handlers and the storage filters all read it
through ``AccessPolicy``; none of them keeps its own copy.
"""

from enum import Enum

from pydantic import Field

from warden.domain.error import UnauthenticatedError, UnauthorizedError
from warden.domain.model import AccessRecord
from warden.domain.value import Role, WorkspaceId
from warden.domain.value.common import ValueObject


class Operation(str, Enum):
    """API operations guarded by role."""

    VIEW_ACCESS = "access:view"
    CREATE_PLATFORM_INVITE = "invite:create:platform"
    CREATE_WORKSPACE_INVITE = "invite:create:workspace"
    LIST_INVITES = "invite:list"
    REVOKE_INVITE = "invite:revoke"
    LIST_STAFF = "staff:list"


class RowScopeKind(str, Enum):
    ALL = "all"
    WORKSPACE = "workspace"
    NONE = "none"


class RowScope(ValueObject):
    """Which tenant rows a request may touch."""

    kind: RowScopeKind
    workspace_id: WorkspaceId | None = None

    @classmethod
    def all(cls) -> "RowScope":
        return cls(kind=RowScopeKind.ALL)

    @classmethod
    def none(cls) -> "RowScope":
        return cls(kind=RowScopeKind.NONE)

    @classmethod
    def workspace(cls, workspace_id: WorkspaceId) -> "RowScope":
        return cls(kind=RowScopeKind.WORKSPACE, workspace_id=workspace_id)

    def allows(self, workspace_id: WorkspaceId | None) -> bool:
        """Whether a row tagged with ``workspace_id`` is visible."""
        if self.kind == RowScopeKind.ALL:
            return True
        if self.kind == RowScopeKind.WORKSPACE:
            return workspace_id is not None and workspace_id == self.workspace_id
        return False


class RolePolicy(ValueObject):
    """What one role may reach."""

    home: str
    route_prefixes: tuple[str, ...]
    operations: frozenset[Operation]
    row_scope: RowScopeKind


ACCESS_POLICY: dict[Role, RolePolicy] = {
    Role.PLATFORM_OPERATOR: RolePolicy(
        home="/platform-admin",
        route_prefixes=("/platform-admin", "/admin", "/app"),
        # Workspace invites come from that workspace's own administrators
        operations=frozenset(Operation) - {Operation.CREATE_WORKSPACE_INVITE},
        row_scope=RowScopeKind.ALL,
    ),
    Role.WORKSPACE_ADMIN: RolePolicy(
        home="/admin/dashboard",
        route_prefixes=("/admin",),
        operations=frozenset(
            {
                Operation.VIEW_ACCESS,
                Operation.CREATE_WORKSPACE_INVITE,
                Operation.LIST_INVITES,
                Operation.REVOKE_INVITE,
                Operation.LIST_STAFF,
            }
        ),
        row_scope=RowScopeKind.WORKSPACE,
    ),
    Role.STAFF: RolePolicy(
        home="/app",
        route_prefixes=("/app",),
        operations=frozenset({Operation.VIEW_ACCESS}),
        row_scope=RowScopeKind.WORKSPACE,
    ),
}

# Reachable without any access record
PUBLIC_ROUTES: tuple[str, ...] = ("/login", "/signup", "/invite", "/unauthorized")

# Reachable by any authenticated role
SHARED_ROUTES: tuple[str, ...] = ("/account", "/onboarding")

SIGN_IN_ROUTE = "/login"
NOT_PERMITTED_ROUTE = "/unauthorized"


class RouteDecision(ValueObject):
    """Outcome of an edge routing check."""

    allowed: bool
    redirect_to: str | None = None
    reason: str = Field(default="allowed")


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


class AccessPolicy:
    """Applies ``ACCESS_POLICY`` to access records.

    Holds the configured platform workspace id so platform-scoped staff are
    filtered to the platform's own rows.
    """

    def __init__(self, platform_workspace_id: WorkspaceId) -> None:
        self.platform_workspace_id = platform_workspace_id

    @staticmethod
    def policy_for(record: AccessRecord) -> RolePolicy | None:
        if record.role is None:
            return None
        return ACCESS_POLICY[record.role]

    def home_for(self, record: AccessRecord) -> str:
        policy = self.policy_for(record)
        return policy.home if policy else SIGN_IN_ROUTE

    @staticmethod
    def is_guarded(path: str) -> bool:
        """Whether any role's area or a shared route covers ``path``."""
        prefixes = [p for policy in ACCESS_POLICY.values() for p in policy.route_prefixes]
        return any(_matches(path, p) for p in (*prefixes, *SHARED_ROUTES))

    def route_decision(self, record: AccessRecord, path: str) -> RouteDecision:
        """Decide whether ``record`` may open the dashboard ``path``."""
        policy = self.policy_for(record)

        if path == "/":
            if policy is None:
                return RouteDecision(allowed=True, reason="public")
            return RouteDecision(allowed=False, redirect_to=policy.home, reason="home")

        if any(_matches(path, p) for p in PUBLIC_ROUTES):
            return RouteDecision(allowed=True, reason="public")

        if not self.is_guarded(path):
            # Not a dashboard area: the API surface authorizes it
            return RouteDecision(allowed=True, reason="unguarded")

        if policy is None:
            return RouteDecision(
                allowed=False, redirect_to=SIGN_IN_ROUTE, reason="unauthenticated"
            )

        if any(_matches(path, p) for p in (*policy.route_prefixes, *SHARED_ROUTES)):
            return RouteDecision(allowed=True)

        return RouteDecision(
            allowed=False, redirect_to=NOT_PERMITTED_ROUTE, reason="unauthorized"
        )

    def row_scope(self, record: AccessRecord) -> RowScope:
        """Rows the record may see in tenant-shared tables."""
        policy = self.policy_for(record)
        if policy is None:
            return RowScope.none()
        if policy.row_scope == RowScopeKind.ALL:
            return RowScope.all()
        if policy.row_scope == RowScopeKind.WORKSPACE:
            return RowScope.workspace(record.workspace_id or self.platform_workspace_id)
        return RowScope.none()

    def can(
        self,
        record: AccessRecord,
        operation: Operation,
        workspace_id: WorkspaceId | None = None,
    ) -> bool:
        policy = self.policy_for(record)
        if policy is None or operation not in policy.operations:
            return False
        if workspace_id is None:
            return True
        return self.row_scope(record).allows(workspace_id)

    def authorize(
        self,
        record: AccessRecord,
        operation: Operation,
        workspace_id: WorkspaceId | None = None,
    ) -> None:
        """Raise unless ``record`` may perform ``operation``.

        When ``workspace_id`` is given the record's row scope must also
        cover that workspace.

        Raises:
            UnauthenticatedError: If the record carries no role
            UnauthorizedError: If the role or scope does not allow it
        """
        if not record.is_authenticated:
            raise UnauthenticatedError()
        if not self.can(record, operation, workspace_id):
            raise UnauthorizedError()
