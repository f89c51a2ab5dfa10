"""Permission checking logic.

The single authorization decision point. ``evaluate_permission`` is a
pure function over the acting user and whatever target data the
override rules need; ``PermissionChecker`` fetches that data from the
directory and never lets a failed lookup turn into an allow.

Denial is a normal return value. Only ``PermissionChecker.enforce``
raises, for action call sites that abort on denial.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError

from journal.core.errors import PermissionDeniedError, UnauthorizedError
from journal.core.permissions import reasons
from journal.core.permissions.catalog import (
    USER_UPDATE,
    is_system_permission,
    is_valid_permission,
)
from journal.core.permissions.overrides import (
    ALLOW_RULES,
    RuleInput,
    first_denial,
    needs_protected_count,
    needs_target,
)
from journal.core.permissions.resolver import (
    get_effective_permissions,
    has_system_access,
    is_granted,
    is_protected,
    resolve_user_permissions,
    role_rank,
)
from journal.core.permissions.schemas import (
    EffectivePermissions,
    PermissionCheckResult,
    PermissionContext,
)


if TYPE_CHECKING:
    from journal.core.permissions.directory import PermissionDirectory
    from journal.core.permissions.models import Role
    from journal.modules.users.models import User


logger = structlog.get_logger()


def evaluate_permission(
    user: "User | None",
    permission: str,
    context: PermissionContext | None = None,
    target: "User | None" = None,
    protected_user_count: int | None = None,
) -> PermissionCheckResult:
    """Decide whether ``user`` may use ``permission``.

    Args:
        user: The acting user, or None when unauthenticated
        permission: The token being checked (e.g., "article.CREATE")
        context: Resource and actor ids for self-access rules
        target: The user named by ``context.resource_id``, if loaded
        protected_user_count: Number of protected-role holders, if loaded

    Returns:
        The decision, with a user-presentable reason on denial
    """
    if user is None:
        return PermissionCheckResult.deny(reasons.AUTHENTICATION_REQUIRED, permission)

    if not is_valid_permission(permission):
        logger.warning("unknown_permission_checked", permission=permission)
        return PermissionCheckResult.deny(reasons.UNKNOWN_PERMISSION, permission)

    rule = RuleInput(
        user=user,
        permission=permission,
        context=context,
        target=target,
        protected_user_count=protected_user_count,
    )

    allowed = is_granted(permission, resolve_user_permissions(user))
    if not allowed:
        allowed = any(allows(rule) for allows in ALLOW_RULES)

    denial = first_denial(rule)
    if denial:
        return PermissionCheckResult.deny(denial, permission)

    if allowed:
        return PermissionCheckResult.allow()

    if is_system_permission(permission):
        return PermissionCheckResult.deny(reasons.SYSTEM_ADMIN_REQUIRED, permission)
    return PermissionCheckResult.deny(reasons.INSUFFICIENT_PERMISSIONS, permission)


def check_role_assignment(actor: "User | None", role: "Role") -> PermissionCheckResult:
    """Decide whether ``actor`` may give ``role`` to a user.

    Requires ``user.UPDATE``. Only system administrators may hand out
    the protected role or a role ranked above their own.
    """
    base = evaluate_permission(actor, USER_UPDATE)
    if not base.allowed or actor is None:
        return base
    if is_protected(actor.role):
        return PermissionCheckResult.allow()
    if is_protected(role):
        return PermissionCheckResult.deny(reasons.PROTECTED_ROLE_ASSIGNMENT, USER_UPDATE)
    if role_rank(role) > role_rank(actor.role):
        return PermissionCheckResult.deny(
            reasons.HIGHER_RANKED_ROLE_ASSIGNMENT, USER_UPDATE
        )
    return PermissionCheckResult.allow()


def check_permission_grant(
    actor: "User | None", permissions: Iterable[str]
) -> PermissionCheckResult:
    """Decide whether ``actor`` may grant ``permissions`` directly to a user."""
    base = evaluate_permission(actor, USER_UPDATE)
    if not base.allowed or actor is None:
        return base
    tokens = list(permissions)
    unknown = [token for token in tokens if not is_valid_permission(token)]
    if unknown:
        return PermissionCheckResult.deny(reasons.UNKNOWN_PERMISSION, unknown[0])
    if any(is_system_permission(token) for token in tokens) and not has_system_access(actor):
        return PermissionCheckResult.deny(reasons.SYSTEM_PERMISSION_GRANT, USER_UPDATE)
    return PermissionCheckResult.allow()


def assignable_roles(actor: "User | None", roles: Sequence["Role"]) -> list["Role"]:
    """Filter ``roles`` down to the ones ``actor`` may assign."""
    return [role for role in roles if check_role_assignment(actor, role).allowed]


class Authorizer(Protocol):
    """What action services depend on to authorize their operations."""

    async def check(
        self,
        user: "User | None",
        permission: str,
        context: PermissionContext | None = None,
    ) -> PermissionCheckResult: ...

    async def enforce(
        self,
        user: "User | None",
        permission: str,
        context: PermissionContext | None = None,
    ) -> None: ...


class PermissionChecker:
    """Service for checking user permissions.

    Loads only the data the override rules need for a given check:
    the target user for edits and deletes of other users, and the
    protected-user count when a protected user would be deleted.
    """

    def __init__(self, directory: "PermissionDirectory") -> None:
        self.directory = directory

    async def check(
        self,
        user: "User | None",
        permission: str,
        context: PermissionContext | None = None,
    ) -> PermissionCheckResult:
        """Check a single permission.

        Args:
            user: The acting user, or None when unauthenticated
            permission: The token to check
            context: Optional resource/actor context

        Returns:
            The decision; a failed data lookup is a denial
        """
        target = None
        protected_user_count = None

        if user is not None and needs_target(user, permission, context):
            try:
                target = await self.directory.get_user(context.resource_id)  # type: ignore[union-attr]
                if needs_protected_count(permission, target):
                    protected_user_count = await self.directory.count_protected_users()
            except (SQLAlchemyError, OSError):
                logger.exception(
                    "permission_lookup_failed",
                    user_id=str(user.id),
                    permission=permission,
                )
                return PermissionCheckResult.deny(reasons.CHECK_FAILED, permission)

        result = evaluate_permission(
            user,
            permission,
            context=context,
            target=target,
            protected_user_count=protected_user_count,
        )

        if not result.allowed:
            logger.debug(
                "permission_denied",
                user_id=str(user.id) if user is not None else None,
                permission=permission,
                reason=result.reason,
            )
        elif target is not None and is_protected(user.role):  # type: ignore[union-attr]
            logger.info(
                "system_role_bypass",
                user_id=str(user.id),  # type: ignore[union-attr]
                target_id=str(target.id),
                permission=permission,
            )
        return result

    async def check_all(
        self,
        user: "User | None",
        permissions: Sequence[str],
        context: PermissionContext | None = None,
    ) -> PermissionCheckResult:
        """Check that the user holds every permission; first denial wins."""
        for permission in permissions:
            result = await self.check(user, permission, context)
            if not result.allowed:
                return result
        return PermissionCheckResult.allow()

    async def check_any(
        self,
        user: "User | None",
        permissions: Sequence[str],
        context: PermissionContext | None = None,
    ) -> PermissionCheckResult:
        """Check that the user holds at least one of the permissions.

        When all are denied, the first contextual reason (self-delete,
        protected target, ...) is returned over the generic one.
        """
        if not permissions:
            return PermissionCheckResult.deny(reasons.NO_PERMISSIONS_SPECIFIED)

        denial: PermissionCheckResult | None = None
        for permission in permissions:
            result = await self.check(user, permission, context)
            if result.allowed:
                return result
            if denial is None or (
                denial.reason in reasons.GENERIC and result.reason not in reasons.GENERIC
            ):
                denial = result

        if user is None or denial.reason not in reasons.GENERIC:  # type: ignore[union-attr]
            return denial  # type: ignore[return-value]
        return PermissionCheckResult.deny(
            reasons.INSUFFICIENT_PERMISSIONS, " OR ".join(permissions)
        )

    async def enforce(
        self,
        user: "User | None",
        permission: str,
        context: PermissionContext | None = None,
    ) -> None:
        """Check a permission and raise when it is denied.

        Raises:
            UnauthorizedError: If there is no authenticated user
            PermissionDeniedError: If the check denies, with its reason as message
        """
        result = await self.check(user, permission, context)
        raise_for_denial(result)

    def get_effective_permissions(self, user: "User") -> EffectivePermissions:
        """Permissions of a user split by origin."""
        return get_effective_permissions(user)


def raise_for_denial(result: PermissionCheckResult) -> None:
    """Turn a denied result into the matching application error."""
    if result.allowed:
        return
    if result.reason == reasons.AUTHENTICATION_REQUIRED:
        raise UnauthorizedError(
            result.reason,
            error_code="auth_required",
            details={"required_permission": result.required_permission},
        )
    raise PermissionDeniedError(
        result.reason or reasons.INSUFFICIENT_PERMISSIONS, result.required_permission
    )


async def check_permission(
    user: "User | None",
    permission: str,
    directory: "PermissionDirectory",
    context: PermissionContext | None = None,
) -> PermissionCheckResult:
    """Convenience function for one-off checks.

    Usage:
        result = await check_permission(user, "article.CREATE", SQLPermissionDirectory(db))
        if not result.allowed:
            ...
    """
    return await PermissionChecker(directory).check(user, permission, context)
