"""Per-request identity and access record providers."""

from dishka import Scope, provide
from fastapi import Request

from warden.config import AuthSettings
from warden.domain.model import AccessRecord, RequestIdentity
from warden.domain.service import JWTService, ResolutionService
from warden.util.di.base import ProviderBase


def session_token(request: Request, cookie_name: str) -> str | None:
    """Session token from the auth cookie, or a Bearer authorization header."""
    token = request.cookies.get(cookie_name)
    if token:
        return token
    scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


class ProdAccessProvider(ProviderBase):
    """Resolves the caller of the current request.

    The edge middleware and the route handlers both ask the request
    container for AccessRecord, so they share one resolution.
    """

    scope = Scope.REQUEST

    @provide
    def get_request_identity(
        self, request: Request, jwt_service: JWTService, auth_settings: AuthSettings
    ) -> RequestIdentity:
        return jwt_service.identify(session_token(request, auth_settings.cookie_name))

    @provide
    async def get_access_record(
        self, identity: RequestIdentity, resolution_service: ResolutionService
    ) -> AccessRecord:
        """Provide the caller's access record.

        Raises:
            StoreUnavailableError: If resolution cannot reach the store
        """
        if identity.principal_id is None:
            return AccessRecord.unauthenticated()
        return await resolution_service.resolve(identity.principal_id)
