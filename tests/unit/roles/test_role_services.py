"""Unit tests for RoleService authorization and business rules."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from journal.core.errors import ConflictError, ForbiddenError, NotFoundError
from journal.core.permissions import reasons
from journal.core.permissions.checker import PermissionChecker
from journal.modules.roles.schemas import RoleCreate, RoleUpdate
from journal.modules.roles.services import RoleService
from tests.factories.role import RoleFactory, build_default_role
from tests.factories.user import UserFactory


pytestmark = pytest.mark.unit


@pytest.fixture
def system_role():
    return build_default_role("Super Admin")


@pytest.fixture
def super_admin(system_role):
    return UserFactory.build(role=system_role)


@pytest.fixture
def admin():
    return UserFactory.build(role=build_default_role("Admin"))


@pytest.fixture
def editor():
    return UserFactory.build(role=build_default_role("Editor"))


@pytest.fixture
def role_repo():
    repo = AsyncMock()
    repo.get_by_name.return_value = None
    repo.create.side_effect = lambda role: role
    repo.update.side_effect = lambda role: role
    return repo


@pytest.fixture
def user_repo():
    repo = AsyncMock()
    repo.count_by_role.return_value = 0
    return repo


@pytest.fixture
def service(role_repo, user_repo):
    return RoleService(role_repo, user_repo, PermissionChecker(AsyncMock()))


class TestReadingRoles:
    """Tests for listing roles."""

    async def test_list_requires_role_read(self, service, editor):
        with pytest.raises(ForbiddenError):
            await service.list_roles(editor)

    async def test_list_assignable(self, service, role_repo, admin, system_role):
        viewer_role = build_default_role("Viewer")
        role_repo.list.return_value = [system_role, admin.role, viewer_role]

        roles = await service.list_assignable(admin)

        assert roles == [admin.role, viewer_role]

    async def test_get_missing_role(self, service, role_repo, admin):
        role_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.get_role(admin, uuid4())


class TestCreateRole:
    """Tests for creating roles."""

    async def test_admin_creates_lower_role(self, service, admin):
        role = await service.create_role(
            admin, RoleCreate(name="Copy Editor", rank=3, permissions=["article.UPDATE"])
        )

        assert role.name == "Copy Editor"
        assert role.permissions == ["article.UPDATE"]
        assert role.is_system is False

    async def test_admin_cannot_create_system_role(self, service, admin):
        with pytest.raises(ForbiddenError) as exc_info:
            await service.create_role(admin, RoleCreate(name="Root", rank=1, is_system=True))

        assert exc_info.value.message == reasons.SYSTEM_ROLE_MANAGEMENT

    async def test_admin_cannot_create_role_with_system_tokens(self, service, admin):
        with pytest.raises(ForbiddenError):
            await service.create_role(
                admin, RoleCreate(name="Backup", rank=1, permissions=["SYSTEM.BACKUP"])
            )

    async def test_admin_cannot_create_higher_role(self, service, admin):
        with pytest.raises(ForbiddenError) as exc_info:
            await service.create_role(admin, RoleCreate(name="Overlord", rank=9))

        assert exc_info.value.message == reasons.HIGHER_RANKED_ROLE

    async def test_super_admin_creates_anything(self, service, super_admin):
        role = await service.create_role(
            super_admin,
            RoleCreate(name="Operator", rank=9, permissions=["SYSTEM.BACKUP"]),
        )

        assert role.rank == 9

    async def test_duplicate_name(self, service, role_repo, admin):
        role_repo.get_by_name.return_value = RoleFactory.build(name="Taken")

        with pytest.raises(ConflictError):
            await service.create_role(admin, RoleCreate(name="Taken", rank=1))


class TestUpdateRole:
    """Tests for updating roles."""

    async def test_update_description_of_system_role(self, service, role_repo, super_admin, system_role):
        role_repo.get_by_id.return_value = system_role

        role = await service.update_role(
            super_admin, system_role.id, RoleUpdate(description="Keeps the lights on")
        )

        assert role.description == "Keeps the lights on"
        assert role.is_system is True

    async def test_system_role_keeps_its_flag(self, service, role_repo, super_admin, system_role):
        role_repo.get_by_id.return_value = system_role

        with pytest.raises(ForbiddenError) as exc_info:
            await service.update_role(super_admin, system_role.id, RoleUpdate(is_system=False))

        assert exc_info.value.message == reasons.SYSTEM_ROLE_UNFLAG

    async def test_system_role_keeps_its_permissions(
        self, service, role_repo, super_admin, system_role
    ):
        role_repo.get_by_id.return_value = system_role

        with pytest.raises(ForbiddenError) as exc_info:
            await service.update_role(
                super_admin, system_role.id, RoleUpdate(permissions=["article.READ"])
            )

        assert exc_info.value.message == reasons.SYSTEM_ROLE_PERMISSIONS

    async def test_admin_cannot_raise_role_above_own(self, service, role_repo, admin):
        target = RoleFactory.build(rank=2)
        role_repo.get_by_id.return_value = target

        with pytest.raises(ForbiddenError) as exc_info:
            await service.update_role(admin, target.id, RoleUpdate(rank=8))

        assert exc_info.value.message == reasons.HIGHER_RANKED_ROLE

    async def test_admin_updates_lower_role(self, service, role_repo, admin):
        target = RoleFactory.build(rank=2, permissions=["article.READ"])
        role_repo.get_by_id.return_value = target

        role = await service.update_role(
            admin, target.id, RoleUpdate(name="Reader", permissions=["article.READ", "post.READ"])
        )

        assert role.name == "Reader"
        assert role.permissions == ["article.READ", "post.READ"]
        assert role.rank == 2


class TestDeleteRole:
    """Tests for deleting roles."""

    async def test_system_role_cannot_be_deleted(self, service, role_repo, super_admin, system_role):
        role_repo.get_by_id.return_value = system_role

        with pytest.raises(ForbiddenError) as exc_info:
            await service.delete_role(super_admin, system_role.id)

        assert exc_info.value.message == reasons.SYSTEM_ROLE_DELETE

    async def test_role_in_use(self, service, role_repo, user_repo, admin):
        target = RoleFactory.build(rank=1)
        role_repo.get_by_id.return_value = target
        user_repo.count_by_role.return_value = 3

        with pytest.raises(ConflictError):
            await service.delete_role(admin, target.id)

        role_repo.delete.assert_not_awaited()

    async def test_delete_unused_role(self, service, role_repo, admin):
        target = RoleFactory.build(rank=1)
        role_repo.get_by_id.return_value = target

        await service.delete_role(admin, target.id)

        role_repo.delete.assert_awaited_once_with(target)
