"""Identity layer callback routes."""

import secrets

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header

from warden.application.usecase.auth import (
    SyncPrincipalRequest,
    SyncPrincipalResponse,
    SyncPrincipalUseCase,
)
from warden.config import IdentitySettings
from warden.domain.error import UnauthenticatedError

router = APIRouter(prefix="/auth", tags=["auth"], route_class=DishkaRoute)


@router.post("/sync", response_model=SyncPrincipalResponse)
async def sync_principal(
    request: SyncPrincipalRequest,
    use_case: FromDishka[SyncPrincipalUseCase],
    identity_settings: FromDishka[IdentitySettings],
    x_service_key: str | None = Header(default=None),
) -> SyncPrincipalResponse:
    """Provision the InternalUser for a principal after its first sign-in.

    Only the identity layer may call this; it authenticates with the
    shared service key.
    """
    if not x_service_key or not secrets.compare_digest(
        x_service_key, identity_settings.service_key
    ):
        raise UnauthenticatedError("Invalid service key")

    return await use_case.execute(request)
