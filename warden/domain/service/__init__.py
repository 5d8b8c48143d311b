"""Domain services."""

from .base import Service
from .identity_provider import IdentityProvider
from .invite_service import InviteService
from .jwt_service import JWTService
from .resolution_service import (
    ResolutionService,
    collect_candidates,
    select_candidate,
)
from .user_service import UserService
from .workspace_service import WorkspaceService

__all__ = [
    "IdentityProvider",
    "InviteService",
    "JWTService",
    "ResolutionService",
    "Service",
    "UserService",
    "WorkspaceService",
    "collect_candidates",
    "select_candidate",
]
