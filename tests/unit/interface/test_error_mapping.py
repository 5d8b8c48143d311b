"""Unit tests for the domain error to HTTP status mapping."""

import pytest

from warden.domain.error import (
    AlreadyMemberError,
    DomainError,
    EmailMismatchError,
    IdentityProviderError,
    InviteAlreadyUsedError,
    InviteExpiredError,
    InviteInvalidError,
    PrincipalExistsError,
    StoreUnavailableError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from warden.interface.error import error_body, status_for


class TestStatusFor:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (UnauthenticatedError(), 401),
            (UnauthorizedError(), 403),
            (StoreUnavailableError(), 503),
            (InviteInvalidError(), 404),
            (InviteExpiredError(), 410),
            (InviteAlreadyUsedError(), 409),
            (EmailMismatchError(), 422),
            (AlreadyMemberError(AlreadyMemberError.ALREADY_STAFF), 409),
            (ValidationError(), 422),
            (IdentityProviderError(), 502),
        ],
    )
    def test_each_error_has_one_status(self, error, expected):
        assert status_for(error) == expected

    def test_most_specific_class_wins(self):
        """PrincipalExistsError is an IdentityProviderError but maps on its own."""
        assert status_for(PrincipalExistsError()) == 409

    def test_unmapped_error_is_bad_request(self):
        assert status_for(DomainError()) == 400


class TestErrorBody:
    def test_body_carries_code_and_message(self):
        error = InviteExpiredError()

        assert error_body(error.code, error.message) == {
            "detail": error.message,
            "code": "invite_expired",
        }

    def test_messages_are_user_facing(self):
        """Every invite error explains what to do next."""
        assert "administrator" in InviteExpiredError().message
        assert "Sign in" in InviteAlreadyUsedError().message
