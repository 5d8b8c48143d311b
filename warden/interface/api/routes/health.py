"""Liveness and readiness probes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy.exc import DBAPIError

from warden.config import Settings
from warden.domain.error import StoreUnavailableError
from warden.domain.repository import TransactionManager

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    git_sha: str
    environment: str


def _health(settings: Settings, status: str) -> HealthResponse:
    return HealthResponse(
        status=status,
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        environment=settings.environment,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """The process is up. Never touches the store."""
    return _health(settings, "healthy")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(
    settings: FromDishka[Settings], transactions: FromDishka[TransactionManager]
) -> HealthResponse:
    """The store answers, so access can be resolved.

    Raises:
        StoreUnavailableError: If the store cannot be reached (503)
    """
    try:
        await transactions.ping()
    except (DBAPIError, OSError) as e:
        raise StoreUnavailableError() from e
    return _health(settings, "ready")
