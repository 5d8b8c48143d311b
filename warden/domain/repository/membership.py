"""Membership repository interface."""

from abc import ABC, abstractmethod

from warden.domain.model import AdminGrant, StaffGrant
from warden.domain.policy import RowScope
from warden.domain.value import UserId, WorkspaceId


class MembershipRepository(ABC):
    """Repository for AdminGrant and StaffGrant.

    Both grant kinds live behind one interface because the store enforces
    constraints across them: a user never holds both kinds.
    """

    @abstractmethod
    async def find_admin_grants(self, user_id: UserId) -> list[AdminGrant]:
        """Find all admin grants of a user, oldest first.

        Args:
            user_id: The user's ID

        Returns:
            Admin grants, platform-wide and workspace-scoped
        """
        pass

    @abstractmethod
    async def find_staff_grants(self, user_id: UserId) -> list[StaffGrant]:
        """Find all staff grants of a user, oldest first.

        Args:
            user_id: The user's ID

        Returns:
            Staff grants (at most one unless the data is damaged)
        """
        pass

    @abstractmethod
    async def add_admin_grant(self, grant: AdminGrant) -> AdminGrant:
        """Insert an admin grant.

        Args:
            grant: The grant to insert

        Returns:
            The inserted grant

        Raises:
            IntegrityError: If the user already holds an admin grant of the
                same kind, or holds a staff grant
        """
        pass

    @abstractmethod
    async def add_staff_grant(self, grant: StaffGrant) -> StaffGrant:
        """Insert a staff grant.

        Args:
            grant: The grant to insert

        Returns:
            The inserted grant

        Raises:
            IntegrityError: If the user already holds a staff grant or any
                admin grant
        """
        pass

    @abstractmethod
    async def list_staff(
        self,
        scope: RowScope,
        workspace_id: WorkspaceId | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[StaffGrant]:
        """List staff grants visible to a row scope.

        Args:
            scope: Row scope of the caller
            workspace_id: Optional narrowing to one workspace
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            Staff grants, newest first
        """
        pass
