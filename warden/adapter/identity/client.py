"""Identity layer admin API client.

Registers password-backed principals with the external identity layer
(GoTrue-compatible admin API) when an invitee accepts without a session.
"""

from uuid import NAMESPACE_URL, uuid5

import httpx
import logfire
from pydantic import SecretStr

from warden.config import IdentitySettings
from warden.domain.error import IdentityProviderError, PrincipalExistsError
from warden.domain.service import IdentityProvider
from warden.domain.value import Email, PrincipalId

# Admin API answers for an email that already has a principal
_CONFLICT_STATUSES = {409, 422}


class HttpIdentityProviderClient(IdentityProvider):
    """Identity provider backed by the identity layer's admin HTTP API."""

    def __init__(
        self,
        settings: IdentitySettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize identity client.

        Args:
            settings: Identity layer configuration
            transport: Optional transport override, used by tests
        """
        self.base_url = settings.base_url.rstrip("/")
        self.service_key = settings.service_key
        self.timeout = settings.timeout_seconds
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }

    async def register_principal(self, email: Email, password: SecretStr) -> PrincipalId:
        body = {
            "email": email.root,
            "password": password.get_secret_value(),
            "email_confirm": True,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    "/admin/users", json=body, headers=self._headers()
                )
        except httpx.HTTPError as e:
            logfire.error("Identity layer unreachable", error=str(e))
            raise IdentityProviderError() from e

        if response.status_code in _CONFLICT_STATUSES and self._is_conflict(response):
            logfire.warn("Identity layer already has principal", email=email.root)
            raise PrincipalExistsError()

        if response.status_code not in (200, 201):
            logfire.error(
                "Identity layer registration failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise IdentityProviderError(
                f"Identity layer registration failed: {response.status_code}"
            )

        principal_id = response.json().get("id")
        if not principal_id:
            logfire.error("Identity layer response missing principal id")
            raise IdentityProviderError("Identity layer returned no principal id")

        logfire.info("Principal registered", principal_id=principal_id)
        return PrincipalId(str(principal_id))

    @staticmethod
    def _is_conflict(response: httpx.Response) -> bool:
        if response.status_code == 409:
            return True
        try:
            payload = response.json()
        except ValueError:
            return False
        code = str(payload.get("error_code") or payload.get("code") or "")
        message = str(payload.get("msg") or payload.get("message") or "").lower()
        return code == "email_exists" or "already" in message


class MockIdentityProviderClient(IdentityProvider):
    """Mock identity provider for testing.

    Principal ids are derived from the email, so a test can predict the id
    a registration will return.
    """

    def __init__(self) -> None:
        self.principals: dict[str, PrincipalId] = {}

    @staticmethod
    def principal_for(email: Email | str) -> PrincipalId:
        address = email.root if isinstance(email, Email) else email.lower()
        return PrincipalId(str(uuid5(NAMESPACE_URL, f"mailto:{address}")))

    def seed(self, email: Email, principal_id: PrincipalId) -> None:
        """Pretend ``email`` already signed up with the identity layer."""
        self.principals[email.root] = principal_id

    async def register_principal(self, email: Email, password: SecretStr) -> PrincipalId:
        if email.root in self.principals:
            raise PrincipalExistsError()
        principal_id = self.principal_for(email)
        self.principals[email.root] = principal_id
        return principal_id
