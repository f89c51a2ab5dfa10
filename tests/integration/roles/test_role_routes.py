"""Integration tests for the role endpoints."""

from uuid import uuid4

import pytest

from journal.core.permissions import reasons
from journal.core.permissions.catalog import DEFAULT_ROLES


pytestmark = pytest.mark.integration

BASE = "/api/v1/roles"


class TestListRoles:
    """Tests for listing roles."""

    async def test_list_roles_by_rank(self, client, admin, auth_headers):
        response = await client.get(BASE, headers=auth_headers(admin))

        assert response.status_code == 200
        assert [r["name"] for r in response.json()] == [d.name for d in DEFAULT_ROLES]

    async def test_list_roles_forbidden(self, client, editor, auth_headers):
        response = await client.get(BASE, headers=auth_headers(editor))

        assert response.status_code == 403

    async def test_assignable_roles(self, client, admin, auth_headers):
        response = await client.get(f"{BASE}/assignable", headers=auth_headers(admin))

        names = [r["name"] for r in response.json()]
        assert "Super Admin" not in names
        assert "Admin" in names

    async def test_assignable_roles_without_user_update(self, client, editor, auth_headers):
        response = await client.get(f"{BASE}/assignable", headers=auth_headers(editor))

        assert response.status_code == 200
        assert response.json() == []

    async def test_get_missing_role(self, client, admin, auth_headers):
        response = await client.get(f"{BASE}/{uuid4()}", headers=auth_headers(admin))

        assert response.status_code == 404


class TestCreateRole:
    """Tests for POST /roles."""

    async def test_create_role(self, client, admin, auth_headers):
        response = await client.post(
            BASE,
            json={
                "name": "Copy Editor",
                "rank": 3,
                "permissions": ["article.UPDATE", "media.READ"],
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["permissions"] == ["article.UPDATE", "media.READ"]
        assert body["is_system"] is False

    async def test_unknown_permission_rejected(self, client, admin, auth_headers):
        response = await client.post(
            BASE,
            json={"name": "Publisher", "permissions": ["article.PUBLISH"]},
            headers=auth_headers(admin),
        )

        assert response.status_code == 422

    async def test_duplicate_name(self, client, admin, auth_headers):
        response = await client.post(
            BASE, json={"name": "Editor", "rank": 1}, headers=auth_headers(admin)
        )

        assert response.status_code == 409

    async def test_admin_cannot_create_system_role(self, client, admin, auth_headers):
        response = await client.post(
            BASE,
            json={"name": "Root", "is_system": True},
            headers=auth_headers(admin),
        )

        assert response.status_code == 403
        assert response.json()["detail"] == reasons.SYSTEM_ROLE_MANAGEMENT


class TestUpdateRole:
    """Tests for PATCH /roles/{role_id}."""

    async def test_rename_role(self, client, admin, roles, auth_headers):
        role = roles["Reviewer"]

        response = await client.patch(
            f"{BASE}/{role.id}",
            json={"name": "Peer Reviewer"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Peer Reviewer"

    async def test_system_role_permissions_are_fixed(
        self, client, super_admin, roles, auth_headers
    ):
        role = roles["Super Admin"]

        response = await client.patch(
            f"{BASE}/{role.id}",
            json={"permissions": ["article.READ"]},
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 403
        assert response.json()["detail"] == reasons.SYSTEM_ROLE_PERMISSIONS

    async def test_admin_cannot_edit_system_role(self, client, admin, roles, auth_headers):
        role = roles["Super Admin"]

        response = await client.patch(
            f"{BASE}/{role.id}",
            json={"description": "Mine now"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 403


class TestDeleteRole:
    """Tests for DELETE /roles/{role_id}."""

    async def test_delete_unused_role(self, client, admin, roles, auth_headers):
        role = roles["Reviewer"]

        response = await client.delete(f"{BASE}/{role.id}", headers=auth_headers(admin))
        assert response.status_code == 204

        response = await client.get(f"{BASE}/{role.id}", headers=auth_headers(admin))
        assert response.status_code == 404

    async def test_role_in_use(self, client, admin, viewer, roles, auth_headers):
        response = await client.delete(
            f"{BASE}/{roles['Viewer'].id}", headers=auth_headers(admin)
        )

        assert response.status_code == 409
        assert response.json()["user_count"] == 1

    async def test_system_role_cannot_be_deleted(self, client, super_admin, roles, auth_headers):
        response = await client.delete(
            f"{BASE}/{roles['Super Admin'].id}", headers=auth_headers(super_admin)
        )

        assert response.status_code == 403
        assert response.json()["detail"] == reasons.SYSTEM_ROLE_DELETE
