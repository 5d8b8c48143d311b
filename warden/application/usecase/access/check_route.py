"""Check route use case."""

from pydantic import BaseModel, Field

from warden.application.usecase.base import BaseUseCase
from warden.domain.model import AccessRecord
from warden.domain.policy import AccessPolicy
from warden.domain.service import ResolutionService


class CheckRouteRequest(BaseModel):
    """Check route request."""

    principal_id: str | None = None
    path: str = Field(min_length=1, max_length=2048)


class CheckRouteResponse(BaseModel):
    """Routing decision for a dashboard path."""

    path: str
    allowed: bool
    redirect_to: str | None
    reason: str


class CheckRouteUseCase(BaseUseCase[CheckRouteRequest, CheckRouteResponse]):
    """Use case for asking where a caller may go in the dashboard.

    Lets a frontend edge that cannot run the middleware itself apply the
    same routing table.
    """

    def __init__(
        self, resolution_service: ResolutionService, access_policy: AccessPolicy
    ) -> None:
        self.resolution_service = resolution_service
        self.access_policy = access_policy

    async def execute(self, request: CheckRouteRequest) -> CheckRouteResponse:
        if request.principal_id is None:
            record = AccessRecord.unauthenticated()
        else:
            record = await self.resolution_service.resolve(request.principal_id)

        path = "/" + request.path.lstrip("/")
        decision = self.access_policy.route_decision(record, path)
        return CheckRouteResponse(
            path=path,
            allowed=decision.allowed,
            redirect_to=decision.redirect_to,
            reason=decision.reason,
        )
