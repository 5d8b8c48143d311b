"""Accept invite use case."""

import pydantic
from pydantic import BaseModel, SecretStr

from warden.application.usecase.access import AccessInfo
from warden.application.usecase.base import BaseUseCase
from warden.domain.error import ValidationError
from warden.domain.model.common import utcnow
from warden.domain.policy import AccessPolicy
from warden.domain.service import InviteService
from warden.domain.service.invite_service import blocked_status_error
from warden.domain.value import Email, InviteCredential, InviteToken, PrincipalId


class AcceptInviteRequest(BaseModel):
    """Accept invite request.

    Either ``password`` (a new account) or ``principal_id`` (the caller's
    signed-in session) is given, never both.
    """

    token: str
    email: str
    password: SecretStr | None = None
    principal_id: str | None = None


class AcceptInviteResponse(BaseModel):
    """Accept invite response."""

    access: AccessInfo
    redirect_to: str


class AcceptInviteUseCase(BaseUseCase[AcceptInviteRequest, AcceptInviteResponse]):
    """Use case for accepting an invite."""

    def __init__(
        self, invite_service: InviteService, access_policy: AccessPolicy
    ) -> None:
        self.invite_service = invite_service
        self.access_policy = access_policy

    async def execute(self, request: AcceptInviteRequest) -> AcceptInviteResponse:
        """Accept an invite and report where the new member lands.

        The token is checked before the credential, so an unusable link is
        reported as such whatever else the form holds.

        Raises:
            InviteError: For each failed acceptance gate
            ValidationError: If the credential is missing or malformed
        """
        token = InviteToken(root=request.token)
        invite = await self.invite_service.get_invite(token)
        blocked = blocked_status_error(invite, utcnow())
        if blocked is not None:
            raise blocked

        credential = self._credential(request)
        record = await self.invite_service.accept_invite(
            token, Email(request.email), credential
        )
        access = AccessInfo.from_record(record, self.access_policy)
        return AcceptInviteResponse(access=access, redirect_to=access.home)

    @staticmethod
    def _credential(request: AcceptInviteRequest) -> InviteCredential:
        if request.password is not None and request.principal_id is not None:
            raise ValidationError(
                "You are already signed in. Sign out to create a new account"
            )
        try:
            if request.principal_id is not None:
                return InviteCredential.with_session(PrincipalId(request.principal_id))
            if request.password is not None:
                return InviteCredential(password=request.password)
        except pydantic.ValidationError as e:
            msg = str(e.errors()[0]["msg"]).removeprefix("Value error, ")
            raise ValidationError(msg) from e
        raise ValidationError("Choose a password or sign in to accept this invite")
