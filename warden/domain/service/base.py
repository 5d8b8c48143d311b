"""Base class for domain services."""


class Service:
    """Marker base for domain services.

    Services own the rules that span users, grants, workspaces and
    invites. They talk to repositories only through the abstract
    interfaces in ``warden.domain.repository``.
    """
