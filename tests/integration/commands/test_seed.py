"""Integration tests for seeding the default roles."""

import pytest
from sqlalchemy import select

from journal.commands.seed import seed_roles
from journal.core.permissions.catalog import ALL_PERMISSIONS
from journal.core.permissions.directory import SQLPermissionDirectory
from journal.core.permissions.models import Role
from journal.core.permissions.resolver import resolve_role_permissions


pytestmark = pytest.mark.integration


async def rename(db, role: Role, name: str) -> None:
    role.name = name
    await db.flush()


class TestSeedRoles:
    """Tests for re-running the role seed over an edited database."""

    async def test_second_run_creates_nothing(self, db, roles):
        created, existing = await seed_roles(db)

        assert created == []
        assert len(existing) == len(roles)

    async def test_renamed_roles_keep_their_flags(self, db, roles):
        protected = roles["Super Admin"]
        viewer = roles["Viewer"]
        await rename(db, protected, "Owner")
        await rename(db, viewer, "Super Admin")

        created, _ = await seed_roles(db)

        assert created == []
        assert protected.is_system is True
        assert viewer.is_system is False
        assert resolve_role_permissions(viewer) != ALL_PERMISSIONS

    async def test_protected_users_survive_name_swap(self, db, roles, super_admin):
        directory = SQLPermissionDirectory(db)
        await rename(db, roles["Admin"], "Managers")
        await rename(db, roles["Super Admin"], "Admin")

        await seed_roles(db)

        assert roles["Super Admin"].is_system is True
        assert roles["Admin"].is_system is False
        assert await directory.count_protected_users() == 1

    async def test_edited_permissions_are_kept(self, db, roles):
        editor = roles["Editor"]
        editor.permissions = ["article.READ"]
        await db.flush()

        await seed_roles(db)

        assert editor.permissions == ["article.READ"]

    async def test_missing_default_is_recreated(self, db, roles):
        await db.delete(roles["Reviewer"])
        await db.flush()

        created, _ = await seed_roles(db)

        assert [role.key for role in created] == ["reviewer"]
        assert created[0].is_system is False

    async def test_taken_name_is_not_reused(self, db, roles):
        await db.delete(roles["Reviewer"])
        await db.flush()
        custom = Role(name="Reviewer", rank=1, permissions=["post.READ"])
        db.add(custom)
        await db.flush()

        created, _ = await seed_roles(db)

        assert created == []
        result = await db.execute(select(Role).where(Role.name == "Reviewer"))
        assert result.scalar_one() is custom
        assert custom.key is None
