"""Provider base class and component selection."""

from typing import ClassVar, Literal, Type

from dishka import Provider

from warden.util.error import ProviderNotFoundError

# Components with an in-memory stand-in for tests
Component = Literal["identity", "persistence"]


class ProviderBase(Provider):
    """Base for every provider in the container.

    Attributes:
        __mock_component__: Component name, set on the base class of a
            swappable component and left None on concrete providers
        __is_mock__: True on the in-memory or fake implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False


def get_provider(base: Type[ProviderBase], use_mock: bool = False) -> Type[ProviderBase]:
    """Pick the implementation of ``base`` to install.

    A provider without subclasses is concrete and returned as is. A
    component base returns the subclass whose ``__is_mock__`` matches
    ``use_mock``; mock subclasses only exist once ``tests.di`` is imported.

    Raises:
        ProviderNotFoundError: If no subclass matches
    """
    subclasses = base.__subclasses__()
    if not subclasses:
        return base

    for candidate in subclasses:
        if getattr(candidate, "__is_mock__", False) == use_mock:
            return candidate

    kind = "mock" if use_mock else "production"
    component = base.__mock_component__ or base.__name__
    raise ProviderNotFoundError(f"No {kind} implementation for {component}")
