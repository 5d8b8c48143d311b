"""Workspace repository interface."""

from abc import ABC, abstractmethod

from warden.domain.model import Workspace
from warden.domain.value import WorkspaceId


class WorkspaceRepository(ABC):
    """Repository for Workspace entity."""

    @abstractmethod
    async def find_by_id(self, workspace_id: WorkspaceId) -> Workspace | None:
        """Find a workspace by ID.

        Args:
            workspace_id: The workspace's unique identifier

        Returns:
            The workspace if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, workspace: Workspace) -> Workspace:
        """Save a workspace (create or update).

        Args:
            workspace: The workspace to save

        Returns:
            The saved workspace
        """
        pass
