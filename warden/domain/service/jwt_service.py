"""Session token verification."""

import logfire

from warden.config import AuthSettings
from warden.domain.model import RequestIdentity
from warden.domain.value import PrincipalId
from warden.util.jwt import JWTError, TokenPayload, verify_token

from .base import Service


class JWTService(Service):
    """Reads the caller's principal out of an identity-layer session token."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        self.auth_settings = auth_settings

    def verify_token(self, token: str) -> TokenPayload:
        """Verify a session token and extract its payload.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
            except JWTError as e:
                logfire.warn("Session token rejected", error=str(e))
                raise
            logfire.debug("Session token verified", principal_id=payload.sub)
            return payload

    def identify(self, token: str | None) -> RequestIdentity:
        """Identity carried by ``token``.

        A missing, expired or forged token all read as anonymous; the
        caller then resolves to an unauthenticated access record.
        """
        if not token:
            return RequestIdentity()
        try:
            payload = self.verify_token(token)
        except JWTError:
            return RequestIdentity()
        return RequestIdentity(principal_id=PrincipalId(payload.sub), email=payload.email)
