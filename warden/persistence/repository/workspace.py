"""PostgreSQL implementation of Workspace repository."""

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import Workspace
from warden.domain.repository import WorkspaceRepository
from warden.domain.value import WorkspaceId
from warden.persistence.mappers import row_to_workspace, workspace_to_dict
from warden.persistence.tables import workspaces_table


class PostgresWorkspaceRepository(WorkspaceRepository):
    """PostgreSQL implementation of WorkspaceRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        stmt = select(workspaces_table).where(workspaces_table.c.id == workspace_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_workspace(dict(row)) if row else None

    async def save(self, workspace: Workspace) -> Workspace:
        values = workspace_to_dict(workspace)

        if await self.find_by_id(workspace.id):
            stmt = (
                update(workspaces_table)
                .where(workspaces_table.c.id == workspace.id)
                .values(**values)
            )
        else:
            stmt = insert(workspaces_table).values(**values)
        await self.session.execute(stmt)

        await self.session.flush()
        return workspace
