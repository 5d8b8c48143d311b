"""Workspace domain service."""

from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from warden.domain.error import AlreadyMemberError, UnauthenticatedError
from warden.domain.model import AdminGrant, StaffGrant, Workspace
from warden.domain.model.common import utcnow
from warden.domain.policy import AccessPolicy, Operation
from warden.domain.repository import (
    MembershipRepository,
    TransactionManager,
    WorkspaceRepository,
)
from warden.domain.value import AdminGrantId, PrincipalId, WorkspaceId

from .base import Service
from .resolution_service import ResolutionService
from .user_service import UserService


class WorkspaceService(Service):
    """Domain service for workspace signup and staff listings."""

    def __init__(
        self,
        workspace_repository: WorkspaceRepository,
        membership_repository: MembershipRepository,
        transaction_manager: TransactionManager,
        user_service: UserService,
        resolution_service: ResolutionService,
        access_policy: AccessPolicy,
    ) -> None:
        self.workspace_repository = workspace_repository
        self.membership_repository = membership_repository
        self.transaction_manager = transaction_manager
        self.user_service = user_service
        self.resolution_service = resolution_service
        self.access_policy = access_policy

    async def create_workspace(self, owner_principal_id: PrincipalId, name: str) -> Workspace:
        """Create a workspace and make the caller its administrator.

        Args:
            owner_principal_id: Principal signing up
            name: Display name

        Returns:
            The created workspace

        Raises:
            UnauthenticatedError: If the principal has not been provisioned
            AlreadyMemberError: If the caller is staff or already administers
                a workspace
        """
        with logfire.span(
            "workspace_service.create_workspace", principal_id=owner_principal_id
        ):
            owner = await self.user_service.get_by_principal(owner_principal_id)
            if owner is None:
                logfire.warn("Workspace signup by unknown principal")
                raise UnauthenticatedError("Finish signing up before creating a workspace")

            if await self.membership_repository.find_staff_grants(owner.id):
                raise AlreadyMemberError(AlreadyMemberError.ALREADY_STAFF)
            admin_grants = await self.membership_repository.find_admin_grants(owner.id)
            if any(g.workspace_id is not None for g in admin_grants):
                raise AlreadyMemberError(AlreadyMemberError.ALREADY_ADMIN)

            now = utcnow()
            workspace = Workspace(
                id=WorkspaceId(uuid4()), name=name, owner_id=owner.id, created_at=now
            )
            try:
                async with self.transaction_manager.atomic():
                    saved = await self.workspace_repository.save(workspace)
                    await self.membership_repository.add_admin_grant(
                        AdminGrant(
                            id=AdminGrantId(uuid4()),
                            user_id=owner.id,
                            workspace_id=saved.id,
                            created_at=now,
                        )
                    )
            except IntegrityError:
                logfire.warn("Workspace owner grant conflicted", user_id=str(owner.id))
                raise AlreadyMemberError(AlreadyMemberError.ALREADY_ADMIN)

            self.resolution_service.forget(owner_principal_id)
            logfire.info(
                "Workspace created", workspace_id=str(saved.id), owner_id=str(owner.id)
            )
            return saved

    async def list_staff(
        self,
        principal_id: PrincipalId,
        workspace_id: WorkspaceId,
        limit: int = 50,
        offset: int = 0,
    ) -> list[StaffGrant]:
        """List staff of a workspace the caller may see.

        Raises:
            UnauthenticatedError: If the caller resolves to no access
            UnauthorizedError: If the caller's scope does not cover the workspace
        """
        with logfire.span(
            "workspace_service.list_staff",
            principal_id=principal_id,
            workspace_id=str(workspace_id),
        ):
            actor = await self.resolution_service.resolve(principal_id)
            self.access_policy.authorize(actor, Operation.LIST_STAFF, workspace_id)

            grants = await self.membership_repository.list_staff(
                self.access_policy.row_scope(actor), workspace_id, limit, offset
            )
            logfire.info("Staff listed", count=len(grants))
            return grants
