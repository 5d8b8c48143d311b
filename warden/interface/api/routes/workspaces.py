"""Workspace routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from warden.application.usecase.workspace import (
    CreateWorkspaceRequest,
    CreateWorkspaceResponse,
    CreateWorkspaceUseCase,
    ListStaffRequest,
    ListStaffResponse,
    ListStaffUseCase,
)
from warden.domain.model import RequestIdentity

router = APIRouter(prefix="/workspaces", tags=["workspaces"], route_class=DishkaRoute)


class CreateWorkspaceAPIRequest(BaseModel):
    """API request for creating a workspace."""

    name: str = Field(min_length=1, max_length=255)


@router.post(
    "", response_model=CreateWorkspaceResponse, status_code=status.HTTP_201_CREATED
)
async def create_workspace(
    request: CreateWorkspaceAPIRequest,
    use_case: FromDishka[CreateWorkspaceUseCase],
    identity: FromDishka[RequestIdentity],
) -> CreateWorkspaceResponse:
    """Create a workspace owned by the caller."""
    return await use_case.execute(
        CreateWorkspaceRequest(principal_id=identity.principal_id, name=request.name)
    )


@router.get("/{workspace_id}/staff", response_model=ListStaffResponse)
async def list_staff(
    workspace_id: UUID,
    use_case: FromDishka[ListStaffUseCase],
    identity: FromDishka[RequestIdentity],
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ListStaffResponse:
    """List staff of a workspace the caller administers."""
    return await use_case.execute(
        ListStaffRequest(
            principal_id=identity.principal_id,
            workspace_id=workspace_id,
            limit=limit,
            offset=offset,
        )
    )
