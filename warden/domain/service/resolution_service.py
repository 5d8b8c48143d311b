"""Access resolution domain service.

Resolution collapses everything a user holds into one AccessRecord:

1. direct platform_operator stamp on the user
2. admin grant without a workspace (or on the platform workspace)
3. admin grant on a real workspace -> workspace_admin of it
4. staff grant -> staff of its workspace

The best priority wins. Two candidates at the same priority are a data
anomaly: the earliest-created grant wins and the tie is logged.
"""

import asyncio

import logfire
from sqlalchemy.exc import DBAPIError

from warden.domain.error import StoreUnavailableError
from warden.domain.model import (
    AccessRecord,
    AdminGrant,
    Candidate,
    InternalUser,
    StaffGrant,
)
from warden.domain.repository import MembershipRepository, UserRepository
from warden.domain.value import GrantSource, PrincipalId, Role, WorkspaceId

from .base import Service


def collect_candidates(
    user: InternalUser,
    admin_grants: list[AdminGrant],
    staff_grants: list[StaffGrant],
    platform_workspace_id: WorkspaceId,
) -> list[Candidate]:
    """Tag every role source of a user with its priority.

    Grants pointing at the platform workspace are platform-scoped, so an
    admin grant there yields platform_operator rather than a workspace_admin
    of the platform.
    """
    candidates: list[Candidate] = []

    if user.direct_role == Role.PLATFORM_OPERATOR:
        candidates.append(
            Candidate(
                source=GrantSource.DIRECT_ROLE,
                role=Role.PLATFORM_OPERATOR,
                created_at=user.created_at,
            )
        )

    for grant in admin_grants:
        if grant.workspace_id is None or grant.workspace_id == platform_workspace_id:
            candidates.append(
                Candidate(
                    source=GrantSource.PLATFORM_ADMIN_GRANT,
                    role=Role.PLATFORM_OPERATOR,
                    created_at=grant.created_at,
                    grant_id=grant.id,
                )
            )
        else:
            candidates.append(
                Candidate(
                    source=GrantSource.WORKSPACE_ADMIN_GRANT,
                    role=Role.WORKSPACE_ADMIN,
                    workspace_id=grant.workspace_id,
                    created_at=grant.created_at,
                    grant_id=grant.id,
                )
            )

    for grant in staff_grants:
        workspace_id = (
            None if grant.workspace_id == platform_workspace_id else grant.workspace_id
        )
        candidates.append(
            Candidate(
                source=GrantSource.STAFF_GRANT,
                role=Role.STAFF,
                workspace_id=workspace_id,
                created_at=grant.created_at,
                grant_id=grant.id,
            )
        )

    return candidates


def select_candidate(candidates: list[Candidate]) -> Candidate | None:
    """Pick the single winning candidate, or None if there are none."""
    if not candidates:
        return None

    best = min(c.priority for c in candidates)
    tied = sorted(
        (c for c in candidates if c.priority == best),
        key=lambda c: (c.created_at, str(c.grant_id or "")),
    )

    if len(tied) > 1:
        logfire.warn(
            "Access resolution tie",
            source=tied[0].source.name,
            candidates=len(tied),
            grant_ids=[str(c.grant_id) for c in tied],
            selected_grant_id=str(tied[0].grant_id),
        )

    return tied[0]


def to_access_record(user: InternalUser, candidate: Candidate | None) -> AccessRecord:
    if candidate is None:
        return AccessRecord.unauthenticated()
    return AccessRecord(
        user_id=user.id,
        role=candidate.role,
        workspace_id=candidate.workspace_id,
        source=candidate.source,
    )


class ResolutionService(Service):
    """Resolves principals to access records.

    Instances live for one request. A principal is resolved against the
    store at most once per instance; later calls reuse the record so every
    enforcement surface in the request sees the same answer. Call
    ``forget`` after writing grants for a principal.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        membership_repository: MembershipRepository,
        platform_workspace_id: WorkspaceId,
        timeout_seconds: float,
    ) -> None:
        """Initialize resolution service.

        Args:
            user_repository: InternalUser repository
            membership_repository: Grant repository
            platform_workspace_id: Configured platform workspace
            timeout_seconds: Limit on the store round-trips of one resolution
        """
        self.user_repository = user_repository
        self.membership_repository = membership_repository
        self.platform_workspace_id = platform_workspace_id
        self.timeout_seconds = timeout_seconds
        self._resolved: dict[PrincipalId, AccessRecord] = {}

    async def resolve(self, principal_id: PrincipalId) -> AccessRecord:
        """Resolve a principal.

        Args:
            principal_id: Authenticated principal

        Returns:
            The principal's access record; unauthenticated if there is no
            user for the principal or the user holds nothing

        Raises:
            StoreUnavailableError: If the store fails or exceeds the timeout
        """
        if principal_id in self._resolved:
            return self._resolved[principal_id]

        with logfire.span("resolution_service.resolve", principal_id=principal_id):
            try:
                record = await asyncio.wait_for(
                    self._resolve(principal_id), timeout=self.timeout_seconds
                )
            except (asyncio.TimeoutError, DBAPIError, OSError) as e:
                logfire.error(
                    "Access resolution failed",
                    principal_id=principal_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise StoreUnavailableError() from e

            self._resolved[principal_id] = record
            logfire.info(
                "Access resolved",
                principal_id=principal_id,
                role=record.role.value if record.role else None,
                workspace_id=str(record.workspace_id) if record.workspace_id else None,
                source=record.source.name if record.source else None,
            )
            return record

    def forget(self, principal_id: PrincipalId | None) -> None:
        """Drop the cached record so the next resolve reads the store."""
        if principal_id is not None:
            self._resolved.pop(principal_id, None)

    async def _resolve(self, principal_id: PrincipalId) -> AccessRecord:
        user = await self.user_repository.find_by_principal_id(principal_id)
        if user is None:
            return AccessRecord.unauthenticated()

        admin_grants = await self.membership_repository.find_admin_grants(user.id)
        staff_grants = await self.membership_repository.find_staff_grants(user.id)

        candidates = collect_candidates(
            user, admin_grants, staff_grants, self.platform_workspace_id
        )
        return to_access_record(user, select_candidate(candidates))
