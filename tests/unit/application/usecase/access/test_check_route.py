"""Tests for check route use case."""

import pytest

from warden.application.usecase.access import CheckRouteRequest, CheckRouteUseCase
from tests.factory import make_workspace_admin
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCheckRouteUseCase:
    """Tests for CheckRouteUseCase."""

    @pytest.mark.asyncio
    async def test_anonymous_caller_sent_to_login(self, unit_env):
        use_case = await unit_env.get(CheckRouteUseCase)

        response = await use_case.execute(CheckRouteRequest(path="admin/dashboard"))

        assert response.path == "/admin/dashboard"
        assert response.allowed is False
        assert response.redirect_to == "/login"

    @pytest.mark.asyncio
    async def test_admin_inside_and_outside_area(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CheckRouteUseCase)
        _, _, principal_id = await make_workspace_admin(unit_env)

        # Act
        inside = await use_case.execute(
            CheckRouteRequest(principal_id=principal_id, path="/admin/staff")
        )
        outside = await use_case.execute(
            CheckRouteRequest(principal_id=principal_id, path="/platform-admin")
        )

        # Assert
        assert inside.allowed is True
        assert outside.allowed is False
        assert outside.redirect_to == "/unauthorized"
