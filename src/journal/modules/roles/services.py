"""Role service for business logic."""

from typing import TYPE_CHECKING, Annotated, Any
from uuid import UUID

import structlog
from fastapi import Depends

from journal.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from journal.core.permissions import reasons
from journal.core.permissions.catalog import (
    ROLE_CREATE,
    ROLE_DELETE,
    ROLE_READ,
    ROLE_UPDATE,
    is_system_permission,
)
from journal.core.permissions.checker import assignable_roles
from journal.core.permissions.dependencies import PermissionCheckerDep
from journal.core.permissions.models import Role
from journal.core.permissions.resolver import has_system_access, is_protected, role_rank
from journal.modules.roles.repos import RoleRepo
from journal.modules.roles.schemas import RoleCreate, RoleUpdate
from journal.modules.users.repos import UserRepo


if TYPE_CHECKING:
    from journal.modules.users.models import User


logger = structlog.get_logger()


class RoleService:
    """Service for role administration.

    Every operation is authorized against the acting user first. On top
    of the ``role.*`` permissions, only system administrators may touch
    system roles or ``SYSTEM.*`` tokens, and lesser users cannot manage
    roles ranked above their own.
    """

    def __init__(
        self,
        repo: RoleRepo,
        users: UserRepo,
        checker: PermissionCheckerDep,
    ) -> None:
        self.repo = repo
        self.users = users
        self.checker = checker

    def _guard_role_content(
        self,
        actor: "User",
        permission: str,
        is_system: bool,
        rank: int,
        permissions: list[str],
    ) -> None:
        if has_system_access(actor):
            return
        if is_system or any(is_system_permission(token) for token in permissions):
            raise PermissionDeniedError(reasons.SYSTEM_ROLE_MANAGEMENT, permission)
        if rank > role_rank(actor.role):
            raise PermissionDeniedError(reasons.HIGHER_RANKED_ROLE, permission)

    async def list_roles(self, actor: "User") -> list[Role]:
        """List every role.

        Raises:
            ForbiddenError: If the actor lacks ``role.READ``
        """
        await self.checker.enforce(actor, ROLE_READ)
        return await self.repo.list()

    async def list_assignable(self, actor: "User") -> list[Role]:
        """List the roles the actor may assign to users."""
        return assignable_roles(actor, await self.repo.list())

    async def get_role(self, actor: "User", role_id: UUID) -> Role:
        """Get a role by ID.

        Raises:
            ForbiddenError: If the actor lacks ``role.READ``
            NotFoundError: If the role doesn't exist
        """
        await self.checker.enforce(actor, ROLE_READ)
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
        return role

    async def create_role(self, actor: "User", data: RoleCreate) -> Role:
        """Create a role.

        Raises:
            ForbiddenError: If the actor may not create this role
            ConflictError: If the name is taken
        """
        await self.checker.enforce(actor, ROLE_CREATE)
        self._guard_role_content(
            actor, ROLE_CREATE, data.is_system, data.rank, data.permissions
        )

        if await self.repo.get_by_name(data.name):
            raise ConflictError(
                "A role with this name already exists",
                error_code="role_name_exists",
                details={"name": data.name},
            )

        role = await self.repo.create(
            Role(
                name=data.name,
                description=data.description,
                rank=data.rank,
                is_system=data.is_system,
                permissions=data.permissions,
            )
        )
        logger.info(
            "role_created",
            role_id=str(role.id),
            name=role.name,
            actor_id=str(actor.id),
        )
        return role

    async def update_role(self, actor: "User", role_id: UUID, data: RoleUpdate) -> Role:
        """Update a role.

        A system role keeps its flag and permission list; only its
        descriptive fields and rank can change.

        Raises:
            ForbiddenError: If the actor may not edit this role
            NotFoundError: If the role doesn't exist
            ConflictError: If the new name is taken
        """
        await self.checker.enforce(actor, ROLE_UPDATE)
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))

        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        if is_protected(role):
            if update_data.get("is_system") is False:
                raise PermissionDeniedError(reasons.SYSTEM_ROLE_UNFLAG, ROLE_UPDATE)
            if "permissions" in update_data and update_data["permissions"] != role.permissions:
                raise PermissionDeniedError(reasons.SYSTEM_ROLE_PERMISSIONS, ROLE_UPDATE)

        # The role as it is now and as it would be must both be in reach
        self._guard_role_content(
            actor, ROLE_UPDATE, role.is_system, role.rank, list(role.permissions or [])
        )
        new_rank = update_data.get("rank")
        self._guard_role_content(
            actor,
            ROLE_UPDATE,
            bool(update_data.get("is_system") or role.is_system),
            role.rank if new_rank is None else new_rank,
            update_data.get("permissions") or [],
        )

        new_name = update_data.get("name")
        if new_name and new_name != role.name:
            existing = await self.repo.get_by_name(new_name)
            if existing and existing.id != role.id:
                raise ConflictError(
                    "A role with this name already exists",
                    error_code="role_name_exists",
                    details={"name": new_name},
                )

        for field, value in update_data.items():
            if value is None and field != "description":
                continue
            setattr(role, field, value)

        role = await self.repo.update(role)
        logger.info(
            "role_updated",
            role_id=str(role.id),
            fields=sorted(update_data),
            actor_id=str(actor.id),
        )
        return role

    async def delete_role(self, actor: "User", role_id: UUID) -> None:
        """Delete a role that no user holds.

        Raises:
            ForbiddenError: If the actor may not delete it, or it is a system role
            NotFoundError: If the role doesn't exist
            ConflictError: If users still hold the role
        """
        await self.checker.enforce(actor, ROLE_DELETE)
        role = await self.repo.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))

        if is_protected(role):
            raise PermissionDeniedError(reasons.SYSTEM_ROLE_DELETE, ROLE_DELETE)
        self._guard_role_content(
            actor, ROLE_DELETE, role.is_system, role.rank, list(role.permissions or [])
        )

        user_count = await self.users.count_by_role(role.id)
        if user_count:
            raise ConflictError(
                "Cannot delete a role that is assigned to users",
                error_code="role_in_use",
                details={"user_count": user_count},
            )

        await self.repo.delete(role)
        logger.info("role_deleted", role_id=str(role_id), actor_id=str(actor.id))


RoleSvc = Annotated[RoleService, Depends(RoleService)]
