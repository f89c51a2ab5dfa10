"""Integration tests for permission decorators.

These tests verify the permission decorator behavior on routes including:
- require_permission
- require_any_permission
- require_all_permissions
- resource-scoped checks through resource_param
"""

from uuid import UUID

import pytest
from fastapi import APIRouter
from httpx import ASGITransport, AsyncClient

from journal.api.dependencies import DBSession
from journal.core.auth.dependencies import CurrentUser
from journal.core.permissions import reasons
from journal.core.permissions.decorators import (
    require_all_permissions,
    require_any_permission,
    require_permission,
)


pytestmark = pytest.mark.integration


# Test router with protected endpoints
test_router = APIRouter()


@test_router.get("/protected-single")
@require_permission("article.CREATE")
async def protected_single(current_user: CurrentUser, db: DBSession):
    """Endpoint requiring a single permission."""
    return {"status": "ok", "user_id": str(current_user.id)}


@test_router.get("/protected-any")
@require_any_permission(["article.DELETE", "article.READ"])
async def protected_any(current_user: CurrentUser, db: DBSession):
    """Endpoint requiring any of the permissions."""
    return {"status": "ok", "user_id": str(current_user.id)}


@test_router.get("/protected-all")
@require_all_permissions(["article.READ", "media.DELETE"])
async def protected_all(current_user: CurrentUser, db: DBSession):
    """Endpoint requiring all permissions."""
    return {"status": "ok", "user_id": str(current_user.id)}


@test_router.get("/profiles/{user_id}")
@require_permission("user.READ", resource_param="user_id")
async def read_profile(user_id: UUID, current_user: CurrentUser, db: DBSession):
    """Endpoint scoped to a user id."""
    return {"status": "ok", "user_id": str(user_id)}


@test_router.delete("/profiles/{user_id}")
@require_permission("user.DELETE", resource_param="user_id")
async def delete_profile(user_id: UUID, current_user: CurrentUser, db: DBSession):
    """Endpoint scoped to a user id; nothing is deleted."""
    return {"status": "ok", "user_id": str(user_id)}


@test_router.post("/profiles/{user_id}/archive")
@require_any_permission(["user.DELETE", "user.UPDATE"], resource_param="user_id")
async def archive_profile(user_id: UUID, current_user: CurrentUser, db: DBSession):
    """Endpoint accepting either permission for a user id."""
    return {"status": "ok", "user_id": str(user_id)}


class TestPermissionDecorators:
    """Tests for permission decorators on routes."""

    @pytest.fixture
    async def test_client(self, app):
        """Client for the app with the test router mounted."""
        app.include_router(test_router, prefix="/test")
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client

    async def test_unauthenticated_request_rejected(self, test_client):
        response = await test_client.get("/test/protected-single")

        assert response.status_code == 401

    async def test_single_permission_allowed(self, test_client, editor, auth_headers):
        response = await test_client.get("/test/protected-single", headers=auth_headers(editor))

        assert response.status_code == 200
        assert response.json()["user_id"] == str(editor.id)

    async def test_single_permission_denied_with_reason(
        self, test_client, viewer, auth_headers
    ):
        response = await test_client.get("/test/protected-single", headers=auth_headers(viewer))

        assert response.status_code == 403
        body = response.json()
        assert body["detail"] == reasons.INSUFFICIENT_PERMISSIONS
        assert body["required_permission"] == "article.CREATE"

    async def test_any_permission(self, test_client, viewer, auth_headers):
        response = await test_client.get("/test/protected-any", headers=auth_headers(viewer))

        assert response.status_code == 200

    async def test_all_permissions(self, test_client, editor, viewer, auth_headers):
        allowed = await test_client.get("/test/protected-all", headers=auth_headers(editor))
        denied = await test_client.get("/test/protected-all", headers=auth_headers(viewer))

        assert allowed.status_code == 200
        assert denied.status_code == 403

    async def test_resource_param_enables_self_read(self, test_client, viewer, editor, auth_headers):
        own = await test_client.get(f"/test/profiles/{viewer.id}", headers=auth_headers(viewer))
        other = await test_client.get(f"/test/profiles/{editor.id}", headers=auth_headers(viewer))

        assert own.status_code == 200
        assert other.status_code == 403

    async def test_resource_param_enables_target_rules(
        self, test_client, admin, super_admin, auth_headers
    ):
        response = await test_client.delete(
            f"/test/profiles/{super_admin.id}", headers=auth_headers(admin)
        )

        assert response.status_code == 403
        assert response.json()["detail"] == reasons.PROTECTED_USER

    async def test_self_delete_denied_for_super_admin(
        self, test_client, super_admin, auth_headers
    ):
        response = await test_client.delete(
            f"/test/profiles/{super_admin.id}", headers=auth_headers(super_admin)
        )

        assert response.status_code == 403
        assert response.json()["detail"] == reasons.SELF_DELETE_FORBIDDEN

    async def test_any_permission_keeps_contextual_reason(
        self, test_client, super_admin, auth_headers
    ):
        response = await test_client.post(
            f"/test/profiles/{super_admin.id}/archive", headers=auth_headers(super_admin)
        )

        assert response.status_code == 403
        assert response.json()["detail"] == reasons.SELF_DELETE_FORBIDDEN
