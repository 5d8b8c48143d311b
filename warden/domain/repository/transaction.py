"""Transaction boundary interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class TransactionManager(ABC):
    """Groups repository writes so they commit or roll back together."""

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic block.

        Writes made inside the block are undone if it exits with an
        exception; the exception propagates.
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Round-trip to the store; raises if it cannot be reached."""
        pass
