"""Unit tests for session token handling."""

from datetime import timedelta

import pytest

from warden.config import AuthSettings
from warden.domain.service import JWTService
from warden.util.jwt import JWTError, create_token, verify_token

SECRET = "unit-test-secret-0123456789abcdef"
SETTINGS = AuthSettings(jwt_secret=SECRET)


class TestVerifyToken:
    """Tests for verify_token()."""

    def test_round_trip(self):
        token = create_token("principal-1", SETTINGS, email="a@acme.test")

        payload = verify_token(token, SETTINGS)

        assert payload.sub == "principal-1"
        assert payload.email == "a@acme.test"

    def test_expired(self):
        token = create_token("principal-1", SETTINGS, expires_in=timedelta(seconds=-5))

        with pytest.raises(JWTError, match="expired"):
            verify_token(token, SETTINGS)

    def test_wrong_secret(self):
        other = AuthSettings(jwt_secret="other-secret-0123456789abcdefghijk")
        token = create_token("principal-1", other)

        with pytest.raises(JWTError, match="Invalid"):
            verify_token(token, SETTINGS)

    def test_audience_is_checked_when_configured(self):
        settings = AuthSettings(jwt_secret=SECRET, jwt_audience="authenticated")
        token = create_token("principal-1", SETTINGS)

        with pytest.raises(JWTError):
            verify_token(token, settings)


class TestIdentify:
    """Tests for JWTService.identify()."""

    def test_valid_token(self):
        service = JWTService(SETTINGS)

        identity = service.identify(create_token("p-9", SETTINGS, email="p9@acme.test"))

        assert identity.principal_id == "p-9"
        assert identity.email == "p9@acme.test"
        assert identity.is_signed_in

    @pytest.mark.parametrize("token", [None, "", "not.a.jwt"])
    def test_missing_or_garbled_token(self, token):
        identity = JWTService(SETTINGS).identify(token)

        assert identity.principal_id is None
        assert not identity.is_signed_in
