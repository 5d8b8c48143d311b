"""Base model for domain entities."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Entities are frozen; changes go through ``model_copy(update=...)``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


def utcnow() -> datetime:
    """Timezone-aware current time, matching TIMESTAMP WITH TIME ZONE columns."""
    return datetime.now(timezone.utc)
