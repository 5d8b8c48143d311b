"""Access routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query

from warden.application.usecase.access import (
    AccessInfo,
    CheckRouteRequest,
    CheckRouteResponse,
    CheckRouteUseCase,
    GetCurrentAccessRequest,
    GetCurrentAccessUseCase,
)
from warden.domain.model import RequestIdentity

router = APIRouter(prefix="/access", tags=["access"], route_class=DishkaRoute)


@router.get("/me", response_model=AccessInfo)
async def get_current_access(
    use_case: FromDishka[GetCurrentAccessUseCase],
    identity: FromDishka[RequestIdentity],
) -> AccessInfo:
    """Get the caller's role, scope and home route.

    Raises:
        UnauthenticatedError: 401 if the caller has no role
    """
    return await use_case.execute(
        GetCurrentAccessRequest(principal_id=identity.principal_id)
    )


@router.get("/route", response_model=CheckRouteResponse)
async def check_route(
    use_case: FromDishka[CheckRouteUseCase],
    identity: FromDishka[RequestIdentity],
    path: str = Query(min_length=1, max_length=2048),
) -> CheckRouteResponse:
    """Ask whether the caller may open a dashboard path."""
    return await use_case.execute(
        CheckRouteRequest(principal_id=identity.principal_id, path=path)
    )
