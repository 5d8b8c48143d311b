"""API container assembly."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from warden.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Container with every production implementation installed.

    FastapiProvider makes the current ``Request`` injectable, which the
    access providers need to read the session cookie or bearer token.
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach ``container`` to ``app``; closed by the app's lifespan."""
    setup_dishka(container, app)
