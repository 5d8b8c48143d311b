"""PostgreSQL implementation of User repository."""

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import InternalUser
from warden.domain.repository import UserRepository
from warden.domain.value import Email, PrincipalId, UserId
from warden.persistence.mappers import row_to_user, user_to_dict
from warden.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> InternalUser | None:
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_principal_id(
        self, principal_id: PrincipalId
    ) -> InternalUser | None:
        stmt = select(users_table).where(users_table.c.principal_id == principal_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: Email) -> InternalUser | None:
        """Find a user by email, ignoring case.

        Uses the lower(email) unique index.
        """
        stmt = (
            select(users_table)
            .where(func.lower(users_table.c.email) == email.root)
            .order_by(users_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def save(self, user: InternalUser) -> InternalUser:
        """Save a user (create or update).

        Raises:
            IntegrityError: On a duplicate email or principal
        """
        user_dict = user_to_dict(user)

        existing = await self.find_by_id(user.id)

        if existing:
            stmt = (
                update(users_table)
                .where(users_table.c.id == user.id)
                .values(**user_dict)
            )
        else:
            stmt = insert(users_table).values(**user_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return user
