"""External identity layer port."""

from abc import ABC, abstractmethod

from pydantic import SecretStr

from warden.domain.value import Email, PrincipalId


class IdentityProvider(ABC):
    """Registers principals with the external identity layer.

    The identity layer owns credentials; this service only needs a stable
    principal id back.
    """

    @abstractmethod
    async def register_principal(self, email: Email, password: SecretStr) -> PrincipalId:
        """Create a password-backed principal.

        Args:
            email: Email the principal signs in with
            password: Initial password

        Returns:
            The new principal's ID

        Raises:
            PrincipalExistsError: If the identity layer already has this email
            IdentityProviderError: If the identity layer fails or is unreachable
        """
        pass
