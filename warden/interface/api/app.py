"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from warden.config import Settings
from warden.interface.api.edge import EdgeAccessMiddleware
from warden.interface.api.routes import access, auth, health, invites, workspaces
from warden.interface.error import register_error_handlers
from warden.util.di.container import create_container, setup_di
from warden.util.observability import instrument_fastapi, instrument_httpx


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container; the production container when omitted
    """
    settings = Settings()

    # Outbound calls to the identity layer
    instrument_httpx()

    app_instance = FastAPI(
        title="Warden API",
        description="Role and workspace resolution and invite lifecycle for a multi-tenant workspace platform",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    # Edge guard first: middleware added later wraps it, so the dishka
    # request container below is already open when it runs
    app_instance.add_middleware(EdgeAccessMiddleware)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())

    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(access.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(workspaces.router)
    app_instance.include_router(invites.router)

    return app_instance
