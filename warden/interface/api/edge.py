"""Edge routing middleware.

Guards dashboard paths with the shared role policy before any handler
runs. The access record comes from the request container, so the edge
and the route handlers share one resolution per request.
"""

from urllib.parse import urlencode

import logfire
from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from warden.domain.error import StoreUnavailableError
from warden.domain.model import AccessRecord
from warden.domain.policy import SIGN_IN_ROUTE, AccessPolicy
from warden.interface.error import error_body


class EdgeAccessMiddleware(BaseHTTPMiddleware):
    """Redirects dashboard requests the caller's role may not open.

    Unauthenticated callers go to sign-in with the original path in
    ``next``; callers outside their area go to the not-permitted page.
    A resolution failure answers 503 rather than letting the request
    through.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path != "/" and not AccessPolicy.is_guarded(path):
            return await call_next(request)

        container = request.state.dishka_container
        try:
            record = await container.get(AccessRecord)
        except StoreUnavailableError as e:
            logfire.error("Edge resolution failed", path=path)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=error_body(e.code, e.message),
            )

        policy = await container.get(AccessPolicy)
        decision = policy.route_decision(record, path)
        if decision.allowed:
            return await call_next(request)

        target = decision.redirect_to
        if target == SIGN_IN_ROUTE:
            target = f"{target}?{urlencode({'next': path})}"

        logfire.info(
            "Edge redirect",
            path=path,
            reason=decision.reason,
            role=record.role.value if record.role else None,
        )
        return RedirectResponse(target, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
