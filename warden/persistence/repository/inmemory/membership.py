"""In-memory membership repository for testing."""

from sqlalchemy.exc import IntegrityError

from warden.domain.model import AdminGrant, StaffGrant
from warden.domain.policy import RowScope
from warden.domain.repository import MembershipRepository
from warden.domain.value import UserId, WorkspaceId

from .store import InMemoryStore


class InMemoryMembershipRepository(MembershipRepository):
    """In-memory implementation of MembershipRepository for testing.

    Enforces the same uniqueness rules as the database indexes and the
    mutual-exclusion trigger.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_admin_grants(self, user_id: UserId) -> list[AdminGrant]:
        await self.store.checkpoint()
        grants = [g for g in self.store.admin_grants.values() if g.user_id == user_id]
        return sorted(grants, key=lambda g: (g.created_at, str(g.id)))

    async def find_staff_grants(self, user_id: UserId) -> list[StaffGrant]:
        await self.store.checkpoint()
        grants = [g for g in self.store.staff_grants.values() if g.user_id == user_id]
        return sorted(grants, key=lambda g: (g.created_at, str(g.id)))

    async def add_admin_grant(self, grant: AdminGrant) -> AdminGrant:
        async with self.store.atomic():
            await self.store.checkpoint()
            for other in self.store.admin_grants.values():
                if other.user_id != grant.user_id:
                    continue
                if (other.workspace_id is None) == (grant.workspace_id is None):
                    raise IntegrityError("Duplicate admin grant", None, Exception())
            if any(g.user_id == grant.user_id for g in self.store.staff_grants.values()):
                raise IntegrityError("User already holds a staff grant", None, Exception())

            self.store.admin_grants[grant.id] = grant
            return grant

    async def add_staff_grant(self, grant: StaffGrant) -> StaffGrant:
        async with self.store.atomic():
            await self.store.checkpoint()
            if any(g.user_id == grant.user_id for g in self.store.staff_grants.values()):
                raise IntegrityError("Duplicate staff grant", None, Exception())
            if any(g.user_id == grant.user_id for g in self.store.admin_grants.values()):
                raise IntegrityError("User already holds an admin grant", None, Exception())

            self.store.staff_grants[grant.id] = grant
            return grant

    async def list_staff(
        self,
        scope: RowScope,
        workspace_id: WorkspaceId | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[StaffGrant]:
        await self.store.checkpoint()
        grants = [
            g
            for g in self.store.staff_grants.values()
            if scope.allows(g.workspace_id)
            and (workspace_id is None or g.workspace_id == workspace_id)
        ]
        grants.sort(key=lambda g: g.created_at, reverse=True)
        return grants[offset : offset + limit]
