"""Invite domain service.

Owns the invite state machine: pending -> accepted | revoked, with
expiry derived at read time.
"""

import secrets
from datetime import datetime, timedelta
from uuid import uuid4

import logfire
from pydantic import SecretStr
from sqlalchemy.exc import IntegrityError

from warden.config import InvitationSettings
from warden.domain.error import (
    AlreadyMemberError,
    EmailMismatchError,
    InviteAlreadyUsedError,
    InviteError,
    InviteExpiredError,
    InviteInvalidError,
    PrincipalExistsError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from warden.domain.model import (
    AccessRecord,
    AdminGrant,
    InternalUser,
    Invite,
    StaffGrant,
)
from warden.domain.model.common import utcnow
from warden.domain.policy import AccessPolicy, Operation
from warden.domain.repository import (
    InviteRepository,
    MembershipRepository,
    TransactionManager,
)
from warden.domain.value import (
    AdminGrantId,
    Email,
    InviteCredential,
    InviteId,
    InviteScope,
    InviteStatus,
    InviteToken,
    PrincipalId,
    Role,
    StaffGrantId,
    WorkspaceId,
)

from .base import Service
from .identity_provider import IdentityProvider
from .resolution_service import ResolutionService
from .user_service import UserService

# Roles an invite may offer in each scope
_INVITABLE_ROLES = {
    True: {Role.STAFF, Role.PLATFORM_OPERATOR},  # platform scope
    False: {Role.STAFF},  # workspace scope
}

_SIGN_IN_FIRST = "An account already exists for this email. Sign in, then open the invite again"


def blocked_status_error(invite: Invite, now: datetime) -> InviteError | None:
    """The error a non-acceptable invite reports, or None if it is acceptable."""
    if invite.status == InviteStatus.ACCEPTED:
        return InviteAlreadyUsedError()
    if invite.status == InviteStatus.REVOKED:
        return InviteInvalidError(
            "This invite was cancelled. Ask your administrator for a new invite"
        )
    if invite.is_expired(now):
        return InviteExpiredError()
    return None


class InviteService(Service):
    """Domain service for the invite lifecycle."""

    def __init__(
        self,
        invite_repository: InviteRepository,
        membership_repository: MembershipRepository,
        transaction_manager: TransactionManager,
        user_service: UserService,
        resolution_service: ResolutionService,
        identity_provider: IdentityProvider,
        access_policy: AccessPolicy,
        invitation_settings: InvitationSettings,
    ) -> None:
        """Initialize invite service.

        Args:
            invite_repository: Invite repository
            membership_repository: Grant repository
            transaction_manager: Transaction boundary for acceptance
            user_service: User provisioning
            resolution_service: Resolves inviters and accepted invitees
            identity_provider: Registers password-backed principals
            access_policy: Shared role policy
            invitation_settings: Token size and expiry
        """
        self.invite_repository = invite_repository
        self.membership_repository = membership_repository
        self.transaction_manager = transaction_manager
        self.user_service = user_service
        self.resolution_service = resolution_service
        self.identity_provider = identity_provider
        self.access_policy = access_policy
        self.invitation_settings = invitation_settings

    @property
    def platform_workspace_id(self) -> WorkspaceId:
        return self.access_policy.platform_workspace_id

    async def create_invite(
        self,
        inviter_principal_id: PrincipalId,
        email: Email,
        role: Role,
        scope: InviteScope,
    ) -> Invite:
        """Create a pending invite.

        The inviter is resolved here, never taken from the caller. Platform
        invites need a platform_operator; workspace invites need the
        workspace_admin of exactly that workspace.

        Args:
            inviter_principal_id: Principal creating the invite
            email: Invitee email
            role: Role offered
            scope: Target scope, always explicit

        Returns:
            The created invite

        Raises:
            UnauthenticatedError: If the inviter resolves to no access
            UnauthorizedError: If the inviter may not invite into the scope
            ValidationError: If the role cannot be offered in the scope
            AlreadyMemberError: If the invitee already holds a grant
        """
        with logfire.span(
            "invite_service.create_invite",
            inviter_principal_id=inviter_principal_id,
            role=role.value,
            scope=scope.kind.value,
            workspace_id=str(scope.workspace_id) if scope.workspace_id else None,
        ):
            if scope.workspace_id == self.platform_workspace_id:
                raise ValidationError("Use platform scope to invite to the platform")
            if role not in _INVITABLE_ROLES[scope.is_platform]:
                raise ValidationError(
                    f"Role {role.value} cannot be offered in {scope.kind.value} scope"
                )

            inviter = await self.resolution_service.resolve(inviter_principal_id)
            if scope.is_platform:
                self.access_policy.authorize(inviter, Operation.CREATE_PLATFORM_INVITE)
            else:
                self.access_policy.authorize(
                    inviter, Operation.CREATE_WORKSPACE_INVITE, scope.workspace_id
                )

            invitee = await self.user_service.find_by_email(email)
            if invitee is not None:
                await self.ensure_can_join(invitee)

            now = utcnow()
            invite = Invite(
                id=InviteId(uuid4()),
                token=InviteToken(
                    secrets.token_urlsafe(self.invitation_settings.token_bytes)
                ),
                email=email,
                role=role,
                workspace_id=scope.workspace_id,
                inviter_id=inviter.user_id,
                status=InviteStatus.PENDING,
                created_at=now,
                expires_at=now + timedelta(days=self.invitation_settings.expiry_days),
            )

            saved = await self.invite_repository.add(invite)
            logfire.info(
                "Invite created",
                invite_id=str(saved.id),
                token=saved.token.fingerprint,
                inviter_id=str(inviter.user_id),
                expires_at=saved.expires_at.isoformat(),
            )
            return saved

    async def get_invite(self, token: InviteToken) -> Invite:
        """Get an invite by token.

        Raises:
            InviteInvalidError: If no invite has this token
        """
        with logfire.span("invite_service.get_invite", token=token.fingerprint):
            invite = await self.invite_repository.find_by_token(token)
            if invite is None:
                logfire.warn("Invite not found", token=token.fingerprint)
                raise InviteInvalidError()
            return invite

    async def accept_invite(
        self, token: InviteToken, email: Email, credential: InviteCredential
    ) -> AccessRecord:
        """Accept an invite.

        Gates, in order, each failing closed:
        1. the invite exists and is pending
        2. it has not expired
        3. the email matches the invite
        4. the user for the email is found or created
        5. the user holds no admin grant
        6. the user holds no staff grant
        7. the invite is claimed and the grant inserted in one transaction;
           a new account is registered with the identity layer only then

        Args:
            token: Invite token
            email: Email the invitee claims
            credential: New password or signed-in principal

        Returns:
            The invitee's access record after acceptance

        Raises:
            InviteInvalidError: If the token is unknown or was revoked
            InviteAlreadyUsedError: If the invite was accepted already
            InviteExpiredError: If the invite is past its expiry
            EmailMismatchError: If the email or session does not match
            AlreadyMemberError: If the user already holds a grant
            UnauthorizedError: If the email already has an account and the
                invitee is not signed in to it
        """
        now = utcnow()
        with logfire.span("invite_service.accept_invite", token=token.fingerprint):
            invite = await self.invite_repository.find_by_token(token)
            if invite is None:
                logfire.warn("Invite not found", token=token.fingerprint)
                raise InviteInvalidError()

            blocked = blocked_status_error(invite, now)
            if blocked is not None:
                logfire.info(
                    "Invite not acceptable",
                    invite_id=str(invite.id),
                    reason=blocked.code,
                )
                raise blocked

            if email != invite.email:
                logfire.warn("Invite email mismatch", invite_id=str(invite.id))
                raise EmailMismatchError()

            try:
                user = await self._resolve_invitee(invite, credential)
                await self.ensure_can_join(user)
            except (AlreadyMemberError, UnauthorizedError) as e:
                # A racing acceptance of this invite outranks what it left behind
                raced = await self._recheck_claim(token, now)
                if raced is not None:
                    raise raced from e
                raise

            try:
                async with self.transaction_manager.atomic():
                    accepted = await self.invite_repository.mark_accepted(
                        token, user.id, now
                    )
                    if accepted is None:
                        raise await self._claim_lost(token, now)
                    await self._insert_grant(invite, user)
                    if user.principal_id is None:
                        # Registered only once the claim is held
                        user = await self._register_principal(
                            invite, user, credential.password
                        )
            except IntegrityError:
                logfire.warn(
                    "Grant insert conflicted", invite_id=str(invite.id), user_id=str(user.id)
                )
                raise await self._membership_conflict(user)

            logfire.info(
                "Invite accepted",
                invite_id=str(invite.id),
                user_id=str(user.id),
                role=invite.role.value,
                workspace_id=str(invite.workspace_id) if invite.workspace_id else None,
            )

            self.resolution_service.forget(user.principal_id)
            return await self.resolution_service.resolve(user.principal_id)

    async def revoke_invite(
        self, token: InviteToken, acting_principal_id: PrincipalId
    ) -> Invite:
        """Revoke a pending invite.

        Allowed for the inviter and for any role whose scope covers the
        invite. Revoking an invite that is already accepted, revoked or
        expired changes nothing and succeeds.

        Raises:
            UnauthenticatedError: If the caller resolves to no access
            InviteInvalidError: If no invite has this token
            UnauthorizedError: If the caller may not revoke this invite
        """
        now = utcnow()
        with logfire.span(
            "invite_service.revoke_invite",
            token=token.fingerprint,
            principal_id=acting_principal_id,
        ):
            actor = await self.resolution_service.resolve(acting_principal_id)
            if not actor.is_authenticated:
                raise UnauthenticatedError()

            invite = await self.get_invite(token)
            if not self._may_revoke(actor, invite):
                logfire.warn(
                    "Invite revoke denied",
                    invite_id=str(invite.id),
                    user_id=str(actor.user_id),
                )
                raise UnauthorizedError()

            if invite.effective_status(now) != InviteStatus.PENDING:
                logfire.info(
                    "Invite already terminal, revoke is a no-op",
                    invite_id=str(invite.id),
                    status=invite.effective_status(now).value,
                )
                return invite

            revoked = await self.invite_repository.mark_revoked(token, now)
            if revoked is None:
                # Accepted or expired between the read and the write
                return await self.get_invite(token)

            logfire.info("Invite revoked", invite_id=str(invite.id))
            return revoked

    async def list_invites(
        self,
        principal_id: PrincipalId,
        status: InviteStatus | None = None,
        workspace_id: WorkspaceId | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        """List invites the caller's scope covers.

        Raises:
            UnauthenticatedError: If the caller resolves to no access
            UnauthorizedError: If the caller may not list invites there
        """
        with logfire.span(
            "invite_service.list_invites",
            principal_id=principal_id,
            status=status.value if status else None,
            limit=limit,
            offset=offset,
        ):
            actor = await self.resolution_service.resolve(principal_id)
            self.access_policy.authorize(actor, Operation.LIST_INVITES, workspace_id)

            invites = await self.invite_repository.list_visible(
                self.access_policy.row_scope(actor),
                utcnow(),
                status,
                workspace_id,
                limit,
                offset,
            )
            logfire.info("Invites listed", count=len(invites))
            return invites

    async def ensure_can_join(self, user: InternalUser) -> None:
        """Reject users whose existing grants rule out a new one.

        Raises:
            AlreadyMemberError: If the user is an administrator or staff
        """
        if user.direct_role is not None:
            raise AlreadyMemberError(AlreadyMemberError.ALREADY_ADMIN)
        if await self.membership_repository.find_admin_grants(user.id):
            raise AlreadyMemberError(AlreadyMemberError.ALREADY_ADMIN)
        if await self.membership_repository.find_staff_grants(user.id):
            raise AlreadyMemberError(AlreadyMemberError.ALREADY_STAFF)

    async def _resolve_invitee(
        self, invite: Invite, credential: InviteCredential
    ) -> InternalUser:
        """Find or create the invitee's user.

        On the password path a new user has no principal yet; it is
        registered with the identity layer only after the invite is claimed.
        """
        existing = await self.user_service.find_by_email(invite.email)

        if credential.principal_id is not None:
            principal_id = credential.principal_id
            session_user = await self.user_service.get_by_principal(principal_id)
            if session_user is not None and session_user.email != invite.email:
                raise EmailMismatchError(
                    "You are signed in with a different email than this invite was sent to"
                )
            if existing is not None:
                if existing.principal_id not in (None, principal_id):
                    raise EmailMismatchError(
                        "You are signed in to a different account than this invite was sent to"
                    )
                await self.ensure_can_join(existing)
                return await self.user_service.link_principal(existing, principal_id)
            return await self.user_service.create_user(invite.email, principal_id)

        if existing is not None and existing.principal_id is not None:
            raise UnauthorizedError(_SIGN_IN_FIRST)
        if existing is not None:
            return existing
        return await self.user_service.create_user(invite.email, None)

    async def _register_principal(
        self, invite: Invite, user: InternalUser, password: SecretStr | None
    ) -> InternalUser:
        try:
            principal_id = await self.identity_provider.register_principal(
                invite.email, password
            )
        except PrincipalExistsError:
            logfire.warn("Identity layer already knows the invitee", invite_id=str(invite.id))
            raise UnauthorizedError(_SIGN_IN_FIRST)
        return await self.user_service.link_principal(user, principal_id)

    async def _insert_grant(self, invite: Invite, user: InternalUser) -> None:
        now = utcnow()
        if invite.role == Role.PLATFORM_OPERATOR:
            await self.membership_repository.add_admin_grant(
                AdminGrant(
                    id=AdminGrantId(uuid4()),
                    user_id=user.id,
                    workspace_id=None,
                    created_at=now,
                )
            )
            return

        # Platform-scoped staff are pinned to the platform workspace
        workspace_id = invite.workspace_id or self.platform_workspace_id
        await self.membership_repository.add_staff_grant(
            StaffGrant(
                id=StaffGrantId(uuid4()),
                user_id=user.id,
                workspace_id=workspace_id,
                created_at=now,
            )
        )

    async def _claim_lost(self, token: InviteToken, now: datetime) -> InviteError:
        """Explain why a conditional claim matched no pending invite."""
        current = await self.invite_repository.find_by_token(token)
        if current is None:
            return InviteInvalidError()
        logfire.info("Invite claim lost", invite_id=str(current.id))
        return blocked_status_error(current, now) or InviteAlreadyUsedError()

    async def _recheck_claim(
        self, token: InviteToken, now: datetime
    ) -> InviteError | None:
        """Gate 1 again, for a read that may predate a racing acceptance."""
        current = await self.invite_repository.find_by_token(token)
        if current is None:
            return InviteInvalidError()
        return blocked_status_error(current, now)

    async def _membership_conflict(self, user: InternalUser) -> AlreadyMemberError:
        if await self.membership_repository.find_admin_grants(user.id):
            return AlreadyMemberError(AlreadyMemberError.ALREADY_ADMIN)
        return AlreadyMemberError(AlreadyMemberError.ALREADY_STAFF)

    def _may_revoke(self, actor: AccessRecord, invite: Invite) -> bool:
        if actor.user_id == invite.inviter_id:
            return True
        if not self.access_policy.can(actor, Operation.REVOKE_INVITE):
            return False
        return self.access_policy.row_scope(actor).allows(invite.workspace_id)
