"""Sync principal use case."""

from pydantic import BaseModel, Field

from warden.application.usecase.base import BaseUseCase
from warden.domain.service import UserService
from warden.domain.value import Email, PrincipalId


class SyncPrincipalRequest(BaseModel):
    """Sync principal request, sent by the identity layer."""

    principal_id: str = Field(min_length=1, max_length=255)
    email: str


class SyncPrincipalResponse(BaseModel):
    """Sync principal response."""

    user_id: str
    email: str
    created: bool


class SyncPrincipalUseCase(BaseUseCase[SyncPrincipalRequest, SyncPrincipalResponse]):
    """Use case for provisioning an InternalUser after first sign-in.

    Idempotent: syncing the same principal again returns the same user.
    """

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: SyncPrincipalRequest) -> SyncPrincipalResponse:
        """Create or link the user for a principal.

        Raises:
            UnauthorizedError: If the email belongs to a user already linked
                to another principal
        """
        user, created = await self.user_service.provision(
            PrincipalId(request.principal_id), Email(request.email)
        )
        return SyncPrincipalResponse(
            user_id=str(user.id), email=user.email.root, created=created
        )
