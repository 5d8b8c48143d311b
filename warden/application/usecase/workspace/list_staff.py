"""List staff use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from warden.application.usecase.base import BaseUseCase
from warden.domain.error import UnauthenticatedError
from warden.domain.service import WorkspaceService
from warden.domain.value import PrincipalId, WorkspaceId


class ListStaffRequest(BaseModel):
    """List staff request."""

    principal_id: str | None = None
    workspace_id: UUID
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class StaffInfo(BaseModel):
    """Staff member information for response."""

    user_id: str
    workspace_id: str
    created_at: datetime


class ListStaffResponse(BaseModel):
    """List staff response."""

    staff: list[StaffInfo]


class ListStaffUseCase(BaseUseCase[ListStaffRequest, ListStaffResponse]):
    """Use case for listing a workspace's staff."""

    def __init__(self, workspace_service: WorkspaceService) -> None:
        self.workspace_service = workspace_service

    async def execute(self, request: ListStaffRequest) -> ListStaffResponse:
        if request.principal_id is None:
            raise UnauthenticatedError()

        grants = await self.workspace_service.list_staff(
            PrincipalId(request.principal_id),
            WorkspaceId(request.workspace_id),
            request.limit,
            request.offset,
        )
        return ListStaffResponse(
            staff=[
                StaffInfo(
                    user_id=str(g.user_id),
                    workspace_id=str(g.workspace_id),
                    created_at=g.created_at,
                )
                for g in grants
            ]
        )
