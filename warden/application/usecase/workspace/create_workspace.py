"""Create workspace use case."""

from datetime import datetime

from pydantic import BaseModel, Field

from warden.application.usecase.access import AccessInfo
from warden.application.usecase.base import BaseUseCase
from warden.domain.error import UnauthenticatedError
from warden.domain.policy import AccessPolicy
from warden.domain.service import ResolutionService, WorkspaceService
from warden.domain.value import PrincipalId


class CreateWorkspaceRequest(BaseModel):
    """Create workspace request."""

    principal_id: str | None = None
    name: str = Field(min_length=1, max_length=255)


class CreateWorkspaceResponse(BaseModel):
    """Create workspace response."""

    workspace_id: str
    name: str
    created_at: datetime
    access: AccessInfo


class CreateWorkspaceUseCase(
    BaseUseCase[CreateWorkspaceRequest, CreateWorkspaceResponse]
):
    """Use case for signing up a new tenant.

    The caller becomes the workspace's administrator.
    """

    def __init__(
        self,
        workspace_service: WorkspaceService,
        resolution_service: ResolutionService,
        access_policy: AccessPolicy,
    ) -> None:
        self.workspace_service = workspace_service
        self.resolution_service = resolution_service
        self.access_policy = access_policy

    async def execute(self, request: CreateWorkspaceRequest) -> CreateWorkspaceResponse:
        if request.principal_id is None:
            raise UnauthenticatedError()

        principal_id = PrincipalId(request.principal_id)
        workspace = await self.workspace_service.create_workspace(
            principal_id, request.name.strip()
        )
        record = await self.resolution_service.resolve(principal_id)

        return CreateWorkspaceResponse(
            workspace_id=str(workspace.id),
            name=workspace.name,
            created_at=workspace.created_at,
            access=AccessInfo.from_record(record, self.access_policy),
        )
