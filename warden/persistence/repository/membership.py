"""PostgreSQL implementation of Membership repository.

The partial unique indexes and the mutual-exclusion trigger created by the
migrations raise unique violations, which surface as IntegrityError.
"""

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import AdminGrant, StaffGrant
from warden.domain.policy import RowScope
from warden.domain.repository import MembershipRepository
from warden.domain.value import UserId, WorkspaceId
from warden.persistence.mappers import (
    admin_grant_to_dict,
    row_to_admin_grant,
    row_to_staff_grant,
    staff_grant_to_dict,
)
from warden.persistence.scoping import narrowed_clause
from warden.persistence.tables import admin_grants_table, staff_grants_table


class PostgresMembershipRepository(MembershipRepository):
    """PostgreSQL implementation of MembershipRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_admin_grants(self, user_id: UserId) -> list[AdminGrant]:
        stmt = (
            select(admin_grants_table)
            .where(admin_grants_table.c.user_id == user_id)
            .order_by(admin_grants_table.c.created_at, admin_grants_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_admin_grant(dict(row)) for row in result.mappings().all()]

    async def find_staff_grants(self, user_id: UserId) -> list[StaffGrant]:
        stmt = (
            select(staff_grants_table)
            .where(staff_grants_table.c.user_id == user_id)
            .order_by(staff_grants_table.c.created_at, staff_grants_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_staff_grant(dict(row)) for row in result.mappings().all()]

    async def add_admin_grant(self, grant: AdminGrant) -> AdminGrant:
        stmt = insert(admin_grants_table).values(**admin_grant_to_dict(grant))
        await self.session.execute(stmt)
        await self.session.flush()
        return grant

    async def add_staff_grant(self, grant: StaffGrant) -> StaffGrant:
        stmt = insert(staff_grants_table).values(**staff_grant_to_dict(grant))
        await self.session.execute(stmt)
        await self.session.flush()
        return grant

    async def list_staff(
        self,
        scope: RowScope,
        workspace_id: WorkspaceId | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[StaffGrant]:
        stmt = (
            select(staff_grants_table)
            .where(narrowed_clause(scope, staff_grants_table.c.workspace_id, workspace_id))
            .order_by(staff_grants_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_staff_grant(dict(row)) for row in result.mappings().all()]
