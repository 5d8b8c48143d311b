"""InternalUser repository interface."""

from abc import ABC, abstractmethod

from warden.domain.model import InternalUser
from warden.domain.value import Email, PrincipalId, UserId


class UserRepository(ABC):
    """Repository for InternalUser entity."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> InternalUser | None:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_principal_id(
        self, principal_id: PrincipalId
    ) -> InternalUser | None:
        """Find the user mapped to an authenticated principal.

        Args:
            principal_id: Subject identifier from the identity layer

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> InternalUser | None:
        """Find a user by email, ignoring case.

        Args:
            email: Normalized email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: InternalUser) -> InternalUser:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user

        Raises:
            IntegrityError: If another user already has this email or principal
        """
        pass
