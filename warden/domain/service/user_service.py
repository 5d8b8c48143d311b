"""InternalUser domain service."""

from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from warden.domain.error import UnauthorizedError
from warden.domain.model import InternalUser
from warden.domain.model.common import utcnow
from warden.domain.repository import TransactionManager, UserRepository
from warden.domain.value import Email, PrincipalId, UserId

from .base import Service


class UserService(Service):
    """Domain service for InternalUser provisioning.

    Email is the natural key across the provisioning boundary. Creation
    relies on the store's unique email constraint: when two callers race,
    the loser re-reads and reuses the winner's row.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        transaction_manager: TransactionManager,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: InternalUser repository
            transaction_manager: Transaction boundary for race-safe inserts
        """
        self.user_repository = user_repository
        self.transaction_manager = transaction_manager

    async def get_by_principal(self, principal_id: PrincipalId) -> InternalUser | None:
        return await self.user_repository.find_by_principal_id(principal_id)

    async def find_by_email(self, email: Email) -> InternalUser | None:
        return await self.user_repository.find_by_email(email)

    async def create_user(
        self, email: Email, principal_id: PrincipalId | None
    ) -> InternalUser:
        """Create a user for an email, or reuse the one a racing caller made.

        Args:
            email: Email address
            principal_id: Principal to map, if already known

        Returns:
            The created or reused user
        """
        with logfire.span("user_service.create_user", principal_id=principal_id):
            user = InternalUser(
                id=UserId(uuid4()),
                principal_id=principal_id,
                email=email,
                created_at=utcnow(),
            )
            try:
                async with self.transaction_manager.atomic():
                    saved = await self.user_repository.save(user)
            except IntegrityError:
                logfire.warn("User creation raced, reusing existing user")
                existing = await self.user_repository.find_by_email(email)
                if existing is None and principal_id is not None:
                    existing = await self.user_repository.find_by_principal_id(
                        principal_id
                    )
                if existing is None:
                    raise
                if existing.principal_id is None and principal_id is not None:
                    return await self.link_principal(existing, principal_id)
                return existing

            logfire.info("User created", user_id=str(saved.id))
            return saved

    async def link_principal(
        self, user: InternalUser, principal_id: PrincipalId
    ) -> InternalUser:
        """Attach a principal to a user that has none yet.

        Args:
            user: User to link
            principal_id: Principal to attach

        Returns:
            The linked user

        Raises:
            UnauthorizedError: If the user is mapped to another principal, or
                the principal already belongs to another user
        """
        if user.principal_id == principal_id:
            return user
        if user.principal_id is not None:
            logfire.warn(
                "User already mapped to another principal",
                user_id=str(user.id),
                principal_id=principal_id,
            )
            raise UnauthorizedError("This email is linked to a different account")

        with logfire.span(
            "user_service.link_principal",
            user_id=str(user.id),
            principal_id=principal_id,
        ):
            linked = user.model_copy(update={"principal_id": principal_id})
            try:
                async with self.transaction_manager.atomic():
                    saved = await self.user_repository.save(linked)
            except IntegrityError:
                logfire.warn(
                    "Principal already mapped to another user",
                    principal_id=principal_id,
                )
                raise UnauthorizedError("This account is linked to a different email")

            logfire.info("Principal linked", user_id=str(user.id))
            return saved

    async def provision(
        self, principal_id: PrincipalId, email: Email
    ) -> tuple[InternalUser, bool]:
        """Ensure an authenticated principal has an InternalUser.

        Called by the identity layer after first sign-in. Reuses a user that
        was created for this email during invite acceptance.

        Args:
            principal_id: Authenticated principal
            email: Email the principal signed in with

        Returns:
            The user and whether it was newly created
        """
        with logfire.span("user_service.provision", principal_id=principal_id):
            user = await self.user_repository.find_by_principal_id(principal_id)
            if user is not None:
                if user.email != email:
                    logfire.warn(
                        "Principal email differs from stored email",
                        user_id=str(user.id),
                    )
                return user, False

            existing = await self.user_repository.find_by_email(email)
            if existing is not None:
                return await self.link_principal(existing, principal_id), False

            return await self.create_user(email, principal_id), True
