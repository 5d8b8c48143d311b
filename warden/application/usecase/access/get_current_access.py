"""Get current access use case."""

from pydantic import BaseModel

from warden.application.usecase.base import BaseUseCase
from warden.domain.error import UnauthenticatedError
from warden.domain.model import AccessRecord
from warden.domain.policy import AccessPolicy
from warden.domain.service import ResolutionService
from warden.domain.value import Role, ScopeKind


class AccessInfo(BaseModel):
    """Access record as returned to clients."""

    user_id: str
    role: Role
    scope: ScopeKind
    workspace_id: str | None
    home: str
    operations: list[str]

    @classmethod
    def from_record(cls, record: AccessRecord, policy: AccessPolicy) -> "AccessInfo":
        role_policy = policy.policy_for(record)
        return cls(
            user_id=str(record.user_id),
            role=record.role,
            scope=ScopeKind.PLATFORM if record.is_platform_scope else ScopeKind.WORKSPACE,
            workspace_id=str(record.workspace_id) if record.workspace_id else None,
            home=policy.home_for(record),
            operations=sorted(op.value for op in role_policy.operations),
        )


class GetCurrentAccessRequest(BaseModel):
    """Get current access request."""

    principal_id: str | None = None


class GetCurrentAccessUseCase(BaseUseCase[GetCurrentAccessRequest, AccessInfo]):
    """Use case for reporting the caller's role, scope and home route."""

    def __init__(
        self, resolution_service: ResolutionService, access_policy: AccessPolicy
    ) -> None:
        self.resolution_service = resolution_service
        self.access_policy = access_policy

    async def execute(self, request: GetCurrentAccessRequest) -> AccessInfo:
        """Resolve the caller.

        Raises:
            UnauthenticatedError: If there is no session, no user for the
                principal, or the user holds no role
            StoreUnavailableError: If resolution cannot reach the store
        """
        if request.principal_id is None:
            raise UnauthenticatedError()

        record = await self.resolution_service.resolve(request.principal_id)
        if not record.is_authenticated:
            raise UnauthenticatedError()
        return AccessInfo.from_record(record, self.access_policy)
