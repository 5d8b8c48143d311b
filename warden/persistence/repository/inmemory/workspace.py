"""In-memory workspace repository for testing."""

from warden.domain.model import Workspace
from warden.domain.repository import WorkspaceRepository
from warden.domain.value import WorkspaceId

from .store import InMemoryStore


class InMemoryWorkspaceRepository(WorkspaceRepository):
    """In-memory implementation of WorkspaceRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        await self.store.checkpoint()
        return self.store.workspaces.get(workspace_id)

    async def save(self, workspace: Workspace) -> Workspace:
        async with self.store.atomic():
            self.store.workspaces[workspace.id] = workspace
            return workspace
