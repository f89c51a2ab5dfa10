"""Integration tests for the permission endpoints."""

import pytest

from journal.core.permissions import reasons
from journal.core.permissions.catalog import ALL_PERMISSIONS, catalog_entries


pytestmark = pytest.mark.integration

BASE = "/api/v1/permissions"


class TestCatalog:
    """Tests for GET /permissions/catalog."""

    async def test_catalog_for_role_reader(self, client, admin, auth_headers):
        response = await client.get(f"{BASE}/catalog", headers=auth_headers(admin))

        assert response.status_code == 200
        entries = response.json()
        assert len(entries) == len(catalog_entries())
        article_all = next(e for e in entries if e["permission"] == "article.ALL")
        assert article_all["implies"] == [
            "article.CREATE",
            "article.DELETE",
            "article.READ",
            "article.UPDATE",
        ]

    async def test_catalog_requires_role_read(self, client, editor, auth_headers):
        response = await client.get(f"{BASE}/catalog", headers=auth_headers(editor))

        assert response.status_code == 403
        assert response.json()["required_permission"] == "role.READ"

    async def test_catalog_requires_authentication(self, client):
        response = await client.get(f"{BASE}/catalog")

        assert response.status_code == 401


class TestMyPermissions:
    """Tests for GET /permissions/me."""

    async def test_super_admin(self, client, super_admin, auth_headers):
        response = await client.get(f"{BASE}/me", headers=auth_headers(super_admin))

        assert response.status_code == 200
        body = response.json()
        assert body["has_system_access"] is True
        assert set(body["all_permissions"]) == ALL_PERMISSIONS

    async def test_viewer(self, client, viewer, auth_headers):
        response = await client.get(f"{BASE}/me", headers=auth_headers(viewer))

        body = response.json()
        assert body["has_system_access"] is False
        assert body["all_permissions"] == [
            "article.READ",
            "author.READ",
            "journalissue.READ",
            "notification.READ",
        ]
        assert body["direct_permissions"] == []


class TestCheck:
    """Tests for POST /permissions/check."""

    async def test_denial_is_returned_not_raised(self, client, viewer, auth_headers):
        response = await client.post(
            f"{BASE}/check",
            json={"permission": "article.CREATE"},
            headers=auth_headers(viewer),
        )

        assert response.status_code == 200
        assert response.json() == {
            "allowed": False,
            "reason": reasons.INSUFFICIENT_PERMISSIONS,
            "required_permission": "article.CREATE",
        }

    async def test_super_admin_is_allowed(self, client, super_admin, auth_headers):
        response = await client.post(
            f"{BASE}/check",
            json={"permission": "notification.DELETE"},
            headers=auth_headers(super_admin),
        )

        assert response.json()["allowed"] is True

    async def test_anonymous_check(self, client):
        response = await client.post(f"{BASE}/check", json={"permission": "article.READ"})

        assert response.status_code == 200
        assert response.json()["reason"] == reasons.AUTHENTICATION_REQUIRED

    async def test_unknown_permission(self, client, super_admin, auth_headers):
        response = await client.post(
            f"{BASE}/check",
            json={"permission": "article.PUBLISH"},
            headers=auth_headers(super_admin),
        )

        assert response.json()["reason"] == reasons.UNKNOWN_PERMISSION

    async def test_self_delete_with_resource(self, client, super_admin, auth_headers):
        response = await client.post(
            f"{BASE}/check",
            json={"permission": "user.DELETE", "resource_id": str(super_admin.id)},
            headers=auth_headers(super_admin),
        )

        assert response.json()["reason"] == reasons.SELF_DELETE_FORBIDDEN

    async def test_editor_against_super_admin(self, client, editor, super_admin, auth_headers):
        response = await client.post(
            f"{BASE}/check",
            json={"permission": "user.UPDATE", "resource_id": str(super_admin.id)},
            headers=auth_headers(editor),
        )

        assert response.json()["allowed"] is False
        assert response.json()["reason"] == reasons.PROTECTED_USER

    async def test_self_service_update(self, client, viewer, auth_headers):
        response = await client.post(
            f"{BASE}/check",
            json={
                "permission": "user.UPDATE",
                "resource_id": str(viewer.id),
                "self_service": True,
            },
            headers=auth_headers(viewer),
        )

        assert response.json()["allowed"] is True
