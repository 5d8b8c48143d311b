"""Domain error to HTTP response mapping.

Every domain error maps to exactly one status. Bodies are
``{"detail": <message>, "code": <code>}`` so clients can branch on the
code and show the message as-is.
"""

import logfire
import pydantic
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from warden.domain.error import (
    AlreadyMemberError,
    DomainError,
    EmailMismatchError,
    IdentityProviderError,
    InviteAlreadyUsedError,
    InviteExpiredError,
    InviteInvalidError,
    NotFoundError,
    PrincipalExistsError,
    StoreUnavailableError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)

ERROR_STATUS: dict[type[DomainError], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    InviteInvalidError: status.HTTP_404_NOT_FOUND,
    InviteExpiredError: status.HTTP_410_GONE,
    InviteAlreadyUsedError: status.HTTP_409_CONFLICT,
    EmailMismatchError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AlreadyMemberError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PrincipalExistsError: status.HTTP_409_CONFLICT,
    IdentityProviderError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: DomainError) -> int:
    """Status of the most specific mapped class of ``exc``."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_400_BAD_REQUEST


def error_body(code: str, detail: str) -> dict[str, str]:
    return {"detail": detail, "code": code}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    log = logfire.error if status_code >= 500 else logfire.info
    log(
        "Request failed",
        path=request.url.path,
        code=exc.code,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=error_body(exc.code, exc.message))


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Database connectivity failures outside resolution also fail closed."""
    logfire.error(
        "Store unavailable", path=request.url.path, error_type=type(exc).__name__
    )
    error = StoreUnavailableError()
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_body(error.code, error.message),
    )


async def model_validation_handler(
    request: Request, exc: pydantic.ValidationError
) -> JSONResponse:
    """Domain value objects rejecting input built inside a handler."""
    first = exc.errors()[0] if exc.errors() else {}
    detail = str(first.get("msg", "The request is invalid")).removeprefix("Value error, ")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(ValidationError.code, detail),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register the domain error mapping on ``app``."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(OperationalError, store_error_handler)
    app.add_exception_handler(InterfaceError, store_error_handler)
    app.add_exception_handler(pydantic.ValidationError, model_validation_handler)
