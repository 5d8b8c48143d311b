"""Errors raised while wiring the application, before any request runs."""


class WiringError(Exception):
    """The process cannot be assembled as configured."""


class ConfigurationError(WiringError):
    """A setting holds a value that must never reach production."""


class ProviderNotFoundError(WiringError):
    """No provider implementation matches the requested component mode."""
