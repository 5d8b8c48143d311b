"""Access use cases."""

from warden.application.usecase.access.check_route import (
    CheckRouteRequest,
    CheckRouteResponse,
    CheckRouteUseCase,
)
from warden.application.usecase.access.get_current_access import (
    AccessInfo,
    GetCurrentAccessRequest,
    GetCurrentAccessUseCase,
)

__all__ = [
    "AccessInfo",
    "CheckRouteRequest",
    "CheckRouteResponse",
    "CheckRouteUseCase",
    "GetCurrentAccessRequest",
    "GetCurrentAccessUseCase",
]
