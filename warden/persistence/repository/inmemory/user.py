"""In-memory user repository for testing."""

from sqlalchemy.exc import IntegrityError

from warden.domain.model import InternalUser
from warden.domain.repository import UserRepository
from warden.domain.value import Email, PrincipalId, UserId

from .store import InMemoryStore


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_id(self, user_id: UserId) -> InternalUser | None:
        await self.store.checkpoint()
        return self.store.users.get(user_id)

    async def find_by_principal_id(
        self, principal_id: PrincipalId
    ) -> InternalUser | None:
        await self.store.checkpoint()
        for user in self.store.users.values():
            if user.principal_id == principal_id:
                return user
        return None

    async def find_by_email(self, email: Email) -> InternalUser | None:
        await self.store.checkpoint()
        matches = [u for u in self.store.users.values() if u.email == email]
        matches.sort(key=lambda u: u.created_at)
        return matches[0] if matches else None

    async def save(self, user: InternalUser) -> InternalUser:
        """Save a user (create or update).

        Raises:
            IntegrityError: If another user has the same email or principal
        """
        async with self.store.atomic():
            for other in self.store.users.values():
                if other.id == user.id:
                    continue
                if other.email == user.email:
                    raise IntegrityError("Duplicate user email", None, Exception())
                if user.principal_id and other.principal_id == user.principal_id:
                    raise IntegrityError("Duplicate user principal", None, Exception())

            self.store.users[user.id] = user
            return user
