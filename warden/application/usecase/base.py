"""Base use case.

A use case takes one pydantic request model, drives domain services and
returns one response model. Routes only ever call ``execute``.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """Orchestrates domain services for a single API operation."""

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT: ...
