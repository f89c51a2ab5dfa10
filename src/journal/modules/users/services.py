"""User service for business logic.

Every operation authorizes the acting user through the permission
checker before touching data, passing the target user's id as context
so the self-access and protected-user rules apply.
"""

from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import Depends

from journal.core.auth.backend import hash_password
from journal.core.constants import DEFAULT_PAGE_SIZE
from journal.core.errors import ConflictError, NotFoundError
from journal.core.permissions.catalog import (
    USER_CREATE,
    USER_DELETE,
    USER_READ,
    USER_UPDATE,
)
from journal.core.permissions.checker import (
    check_permission_grant,
    check_role_assignment,
    raise_for_denial,
)
from journal.core.permissions.dependencies import PermissionCheckerDep
from journal.core.permissions.models import Role
from journal.core.permissions.schemas import PermissionContext
from journal.modules.roles.repos import RoleRepo
from journal.modules.users.models import User
from journal.modules.users.repos import UserRepo
from journal.modules.users.schemas import ProfileUpdate, UserCreate, UserUpdate


logger = structlog.get_logger()


def _target(actor: User, user_id: UUID, self_service: bool = False) -> PermissionContext:
    return PermissionContext(resource_id=user_id, actor_id=actor.id, self_service=self_service)


class UserService:
    """Service for user administration and self-service profile edits."""

    def __init__(
        self,
        repo: UserRepo,
        roles: RoleRepo,
        checker: PermissionCheckerDep,
    ) -> None:
        self.repo = repo
        self.roles = roles
        self.checker = checker

    async def _get_or_404(self, user_id: UUID) -> User:
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found", resource="user", resource_id=str(user_id))
        return user

    async def _get_role_or_404(self, role_id: UUID) -> Role:
        role = await self.roles.get_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
        return role

    async def _ensure_email_free(self, email: str, user_id: UUID | None = None) -> None:
        existing = await self.repo.get_by_email(email)
        if existing and existing.id != user_id:
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": email},
            )

    async def list_users(
        self,
        actor: User,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[User], int]:
        """List users with pagination.

        Raises:
            ForbiddenError: If the actor lacks ``user.READ``
        """
        await self.checker.enforce(actor, USER_READ)
        return await self.repo.list(page, page_size)

    async def get_user(self, actor: User, user_id: UUID) -> User:
        """Get a user by ID. Users can always read themselves.

        Raises:
            ForbiddenError: If the actor may not read this user
            NotFoundError: If the user doesn't exist
        """
        await self.checker.enforce(actor, USER_READ, _target(actor, user_id))
        return await self._get_or_404(user_id)

    async def create_user(self, actor: User, data: UserCreate) -> User:
        """Create a user with the given role.

        Args:
            actor: The acting user
            data: User creation data

        Returns:
            The created user

        Raises:
            ForbiddenError: If the actor may not create users or assign the role
            NotFoundError: If the role doesn't exist
            ConflictError: If the email is already registered
        """
        await self.checker.enforce(actor, USER_CREATE)
        role = await self._get_role_or_404(data.role_id)
        raise_for_denial(check_role_assignment(actor, role))
        await self._ensure_email_free(data.email)

        user = await self.repo.create(
            User(
                email=data.email,
                full_name=data.full_name,
                password_hash=hash_password(data.password),
                role_id=role.id,
                extra_permissions=[],
            )
        )
        logger.info(
            "user_created",
            user_id=str(user.id),
            role_id=str(role.id),
            actor_id=str(actor.id),
        )
        return user

    async def update_user(self, actor: User, user_id: UUID, data: UserUpdate) -> User:
        """Edit another user from the admin interface.

        Raises:
            ForbiddenError: If the check denies, including edits of oneself
            NotFoundError: If the user doesn't exist
            ConflictError: If the new email is already registered
        """
        await self.checker.enforce(actor, USER_UPDATE, _target(actor, user_id))
        user = await self._get_or_404(user_id)

        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in update_data:
            await self._ensure_email_free(update_data["email"], user.id)

        for field, value in update_data.items():
            setattr(user, field, value)

        user = await self.repo.update(user)
        logger.info(
            "user_updated",
            user_id=str(user.id),
            fields=sorted(update_data),
            actor_id=str(actor.id),
        )
        return user

    async def update_profile(self, actor: User, data: ProfileUpdate) -> User:
        """Edit the actor's own account through the profile settings flow."""
        await self.checker.enforce(
            actor, USER_UPDATE, _target(actor, actor.id, self_service=True)
        )

        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in update_data:
            await self._ensure_email_free(update_data["email"], actor.id)

        password = update_data.pop("password", None)
        if password:
            actor.password_hash = hash_password(password)

        for field, value in update_data.items():
            setattr(actor, field, value)

        user = await self.repo.update(actor)
        logger.info(
            "profile_updated",
            user_id=str(user.id),
            fields=sorted(update_data) + (["password"] if password else []),
        )
        return user

    async def delete_user(self, actor: User, user_id: UUID) -> None:
        """Delete a user.

        Raises:
            ForbiddenError: For self-deletion, protected users, or the last
                system administrator
            NotFoundError: If the user doesn't exist
        """
        await self.checker.enforce(actor, USER_DELETE, _target(actor, user_id))
        user = await self._get_or_404(user_id)
        await self.repo.delete(user)
        logger.info("user_deleted", user_id=str(user_id), actor_id=str(actor.id))

    async def assign_role(self, actor: User, user_id: UUID, role_id: UUID) -> User:
        """Give a user a different role.

        Raises:
            ForbiddenError: If the actor may not edit the user or assign the role
            NotFoundError: If the user or role doesn't exist
        """
        await self.checker.enforce(actor, USER_UPDATE, _target(actor, user_id))
        user = await self._get_or_404(user_id)
        role = await self._get_role_or_404(role_id)
        raise_for_denial(check_role_assignment(actor, role))

        previous_role_id = user.role_id
        user.role_id = role.id
        user.role = role
        user = await self.repo.update(user)
        logger.info(
            "user_role_assigned",
            user_id=str(user.id),
            previous_role_id=str(previous_role_id),
            role_id=str(role.id),
            actor_id=str(actor.id),
        )
        return user

    async def update_user_permissions(
        self, actor: User, user_id: UUID, permissions: list[str]
    ) -> User:
        """Replace the permissions granted directly to a user.

        Raises:
            ForbiddenError: If the actor may not edit the user or grant the tokens
            NotFoundError: If the user doesn't exist
        """
        await self.checker.enforce(actor, USER_UPDATE, _target(actor, user_id))
        user = await self._get_or_404(user_id)
        raise_for_denial(check_permission_grant(actor, permissions))

        user.extra_permissions = list(permissions)
        user = await self.repo.update(user)
        logger.info(
            "user_permissions_updated",
            user_id=str(user.id),
            permissions=user.extra_permissions,
            actor_id=str(actor.id),
        )
        return user


UserSvc = Annotated[UserService, Depends(UserService)]
