"""Tests for sync principal use case."""

import pytest

from warden.application.usecase.auth import SyncPrincipalRequest, SyncPrincipalUseCase
from tests.factory import new_principal
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestSyncPrincipalUseCase:
    """Tests for SyncPrincipalUseCase."""

    @pytest.mark.asyncio
    async def test_sync_is_idempotent(self, unit_env):
        """The second sync returns the user the first one created."""
        # Arrange
        use_case = await unit_env.get(SyncPrincipalUseCase)
        request = SyncPrincipalRequest(principal_id=new_principal(), email="New@Acme.test")

        # Act
        first = await use_case.execute(request)
        second = await use_case.execute(request)

        # Assert
        assert first.created is True
        assert second.created is False
        assert first.user_id == second.user_id
        assert first.email == "new@acme.test"
