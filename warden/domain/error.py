"""Domain layer errors.

Every error carries a stable ``code`` for clients and a message that is
safe to show to the person who triggered it.
"""


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"
    default_message = "The request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Domain validation error."""

    code = "validation_error"
    default_message = "The request is invalid"


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


# Access errors


class AccessError(DomainError):
    """Base for errors raised while deciding who may do what."""


class UnauthenticatedError(AccessError):
    """No principal, or the principal resolves to no access."""

    code = "unauthenticated"
    default_message = "Sign in to continue"


class UnauthorizedError(AccessError):
    """Authenticated, but the role or scope does not allow the operation."""

    code = "unauthorized"
    default_message = "You do not have permission to do that"


class StoreUnavailableError(AccessError):
    """The backing store could not be reached in time.

    Never treated as "no access": callers deny the request.
    """

    code = "store_unavailable"
    default_message = "Access could not be verified right now, please try again"


# Invite errors


class InviteError(DomainError):
    """Base for invite lifecycle errors."""


class InviteInvalidError(InviteError):
    """The token does not name a usable invite."""

    code = "invite_invalid"
    default_message = "This invite link is not valid. Check that you copied the full link"


class InviteExpiredError(InviteError):
    """The invite exists but its expiry has passed."""

    code = "invite_expired"
    default_message = "This invite has expired. Ask your administrator for a new invite"


class InviteAlreadyUsedError(InviteError):
    """The invite was already accepted."""

    code = "invite_already_used"
    default_message = "This invite has already been used. Sign in instead"


class EmailMismatchError(InviteError):
    """The email presented does not match the invited address."""

    code = "email_mismatch"
    default_message = "This invite was sent to a different email address"


class AlreadyMemberError(InviteError):
    """The user already holds a grant that rules out the new one."""

    code = "already_member"

    ALREADY_ADMIN = "already_admin"
    ALREADY_STAFF = "already_staff"

    _MESSAGES = {
        ALREADY_ADMIN: "This account is already an administrator",
        ALREADY_STAFF: "This account is already a staff member elsewhere",
    }

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(self._MESSAGES.get(reason, "This account is already a member"))


# Identity layer errors


class IdentityProviderError(DomainError):
    """The external identity layer failed or could not be reached."""

    code = "identity_unavailable"
    default_message = "Sign-up is unavailable right now, please try again"


class PrincipalExistsError(IdentityProviderError):
    """The identity layer already has an account for this email."""

    code = "principal_exists"
    default_message = "An account already exists for this email"
