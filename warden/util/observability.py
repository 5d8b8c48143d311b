"""Observability configuration using Logfire.

Services log through logfire directly:

    import logfire

    logfire.info("Invite created", invite_id=str(invite.id))

    with logfire.span("invite_service.accept_invite", token=token.fingerprint):
        ...

Invite tokens are bearer secrets. Log ``token.fingerprint``, never the
token itself.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from warden.config import Settings

_SCRUB_PATTERNS = ["invite_token", "service_key", "raw_token"]

# Probes would drown the request traces
_UNTRACED_URLS = ["/health", "/health/ready"]


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Telemetry is sent to Logfire cloud when explicitly enabled, or when a
    token is configured and sending is not explicitly disabled. Otherwise
    output stays on the console.

    Args:
        settings: Application settings
    """
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs = {
        "service_name": "warden",
        "service_version": settings.git_sha,
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
        # Raw invite tokens and the identity service key never leave the process
        "scrubbing": logfire.ScrubbingOptions(extra_patterns=_SCRUB_PATTERNS),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every HTTP request handled by ``app``.

    Cookies and authorization headers are left out of the captured
    attributes since they carry session tokens.
    """

    def _map_request_attributes(request, attributes):
        result = {**attributes}
        values = result.get("values")
        if isinstance(values, dict) and "token" in values:
            # Route parameters carry raw invite tokens
            result["values"] = {**values, "token": "[redacted]"}
        if hasattr(request, "method"):
            result["method"] = request.method
        route = request.scope.get("route") if hasattr(request, "scope") else None
        if route is not None:
            # Template, not the concrete path, which may embed a token
            result["path"] = route.path
        if hasattr(request, "client") and request.client:
            result["client_host"] = request.client.host
        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        excluded_urls=_UNTRACED_URLS,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL queries issued through ``engine``.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,
    )
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Trace outbound calls to the identity layer."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
