"""JWT token utilities.

Session tokens are minted by the external identity layer. ``create_token``
exists for local development and tests, which need tokens signed with the
shared secret.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from warden.config import AuthSettings


class TokenPayload(BaseModel):
    """Claims this service reads from a session token.

    ``sub`` is the identity-layer principal id.
    """

    sub: str
    exp: datetime
    email: str | None = None


class JWTError(Exception):
    """The session token cannot be trusted."""


def create_token(
    principal_id: str,
    settings: AuthSettings,
    email: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Create a session token for a principal.

    Args:
        principal_id: Subject identifier
        settings: Authentication settings
        email: Optional email claim
        expires_in: Token lifetime

    Returns:
        Encoded JWT token
    """
    payload: dict = {
        "sub": principal_id,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if email:
        payload["email"] = email
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"]},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError as e:
        raise JWTError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise JWTError("Invalid token") from e
