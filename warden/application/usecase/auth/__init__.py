"""Auth use cases."""

from warden.application.usecase.auth.sync_principal import (
    SyncPrincipalRequest,
    SyncPrincipalResponse,
    SyncPrincipalUseCase,
)

__all__ = [
    "SyncPrincipalRequest",
    "SyncPrincipalResponse",
    "SyncPrincipalUseCase",
]
