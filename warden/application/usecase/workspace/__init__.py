"""Workspace use cases."""

from warden.application.usecase.workspace.create_workspace import (
    CreateWorkspaceRequest,
    CreateWorkspaceResponse,
    CreateWorkspaceUseCase,
)
from warden.application.usecase.workspace.list_staff import (
    ListStaffRequest,
    ListStaffResponse,
    ListStaffUseCase,
    StaffInfo,
)

__all__ = [
    "CreateWorkspaceRequest",
    "CreateWorkspaceResponse",
    "CreateWorkspaceUseCase",
    "ListStaffRequest",
    "ListStaffResponse",
    "ListStaffUseCase",
    "StaffInfo",
]
