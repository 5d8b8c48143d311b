"""Unit tests for access value objects and entities."""

from datetime import timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from warden.config import InvitationSettings, PlatformSettings
from warden.domain.model import AccessRecord, InternalUser, Invite
from warden.domain.model.common import utcnow
from warden.domain.value import (
    Email,
    InviteCredential,
    InviteId,
    InviteScope,
    InviteStatus,
    InviteToken,
    PrincipalId,
    Role,
    ScopeKind,
    UserId,
    WorkspaceId,
)


def _invite(**overrides) -> Invite:
    now = utcnow()
    fields = dict(
        id=InviteId(uuid4()),
        token=InviteToken("abc"),
        email=Email("nurse@acme.test"),
        role=Role.STAFF,
        inviter_id=UserId(uuid4()),
        created_at=now,
        expires_at=now + timedelta(days=30),
    )
    fields.update(overrides)
    return Invite(**fields)


class TestEmail:
    def test_normalized_to_lowercase(self):
        assert Email(" Nurse@ACME.test ").root == "nurse@acme.test"
        assert Email("A@B.co") == Email("a@b.co")

    @pytest.mark.parametrize("value", ["", "no-at-sign", "a@b", "two@@x.com"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError):
            Email(value)


class TestInviteToken:
    def test_fingerprint_does_not_reveal_token(self):
        token = InviteToken("s3cret-token-value")

        assert len(token.fingerprint) == 8
        assert token.root not in token.fingerprint

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            InviteToken("")


class TestInviteScope:
    def test_platform_scope_has_no_workspace(self):
        with pytest.raises(ValidationError):
            InviteScope(kind=ScopeKind.PLATFORM, workspace_id=WorkspaceId(uuid4()))

    def test_workspace_scope_needs_workspace(self):
        with pytest.raises(ValidationError):
            InviteScope(kind=ScopeKind.WORKSPACE)


class TestInviteCredential:
    def test_exactly_one_credential(self):
        with pytest.raises(ValidationError):
            InviteCredential()
        with pytest.raises(ValidationError):
            InviteCredential(password="long-enough-pw", principal_id=PrincipalId("p"))

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            InviteCredential.with_password("short")

    def test_password_is_hidden(self):
        credential = InviteCredential.with_password("correct-horse-battery")

        assert "correct-horse-battery" not in repr(credential)


class TestInvite:
    def test_expiry_is_derived(self):
        """A pending invite past expiry reads as expired without being rewritten."""
        invite = _invite()
        later = invite.expires_at + timedelta(seconds=1)

        assert invite.effective_status(invite.created_at) == InviteStatus.PENDING
        assert invite.effective_status(later) == InviteStatus.EXPIRED
        assert invite.status == InviteStatus.PENDING

    def test_terminal_status_wins_over_expiry(self):
        invite = _invite(status=InviteStatus.REVOKED)

        assert invite.effective_status(invite.expires_at + timedelta(days=1)) == (
            InviteStatus.REVOKED
        )

    def test_expired_is_never_stored(self):
        with pytest.raises(ValidationError):
            _invite(status=InviteStatus.EXPIRED)

    def test_expiry_after_creation(self):
        now = utcnow()
        with pytest.raises(ValidationError):
            _invite(created_at=now, expires_at=now)

    def test_scope_follows_workspace(self):
        workspace_id = WorkspaceId(uuid4())

        assert _invite().scope.is_platform
        assert _invite(workspace_id=workspace_id).scope == InviteScope.workspace(workspace_id)


class TestAccessRecord:
    def test_workspace_admin_needs_workspace(self):
        with pytest.raises(ValidationError):
            AccessRecord(user_id=UserId(uuid4()), role=Role.WORKSPACE_ADMIN)

    def test_operator_is_never_workspace_scoped(self):
        with pytest.raises(ValidationError):
            AccessRecord(
                user_id=UserId(uuid4()),
                role=Role.PLATFORM_OPERATOR,
                workspace_id=WorkspaceId(uuid4()),
            )

    def test_unauthenticated_carries_nothing(self):
        record = AccessRecord.unauthenticated()

        assert not record.is_authenticated
        assert not record.is_platform_scope
        with pytest.raises(ValidationError):
            AccessRecord(user_id=UserId(uuid4()))


class TestInternalUser:
    def test_only_operator_is_direct(self):
        with pytest.raises(ValidationError):
            InternalUser(
                id=UserId(uuid4()), email=Email("a@acme.test"), direct_role=Role.STAFF
            )


class TestSettings:
    def test_token_entropy_floor(self):
        with pytest.raises(ValidationError):
            InvitationSettings(token_bytes=15)

    def test_platform_workspace_is_not_nil(self):
        with pytest.raises(ValidationError):
            PlatformSettings(workspace_id="00000000-0000-0000-0000-000000000000")
