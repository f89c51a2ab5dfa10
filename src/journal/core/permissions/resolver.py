"""Role-to-permission resolution.

Computes the effective permission set of a role or user. Stored tokens
are expanded through the catalog (system permissions and the operation
hierarchy); tokens the catalog does not know are logged and dropped so
a stale role never fails resolution and never grants anything.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from journal.core.permissions.catalog import (
    ALL_PERMISSIONS,
    implied_permissions,
    is_system_permission,
    is_valid_permission,
)
from journal.core.permissions.schemas import EffectivePermissions


if TYPE_CHECKING:
    from journal.core.permissions.models import Role
    from journal.modules.users.models import User


logger = structlog.get_logger()


def is_protected(role: "Role | None") -> bool:
    """Check whether a role is the protected, top-rank role."""
    return role is not None and bool(role.is_system)


def role_rank(role: "Role | None") -> int:
    """Privilege ordinal of a role; no role ranks lowest."""
    if role is None:
        return -1
    return role.rank or 0


def expand_permissions(
    tokens: Iterable[str] | None,
    source: str | None = None,
) -> frozenset[str]:
    """Expand stored tokens into the set of permissions they grant.

    Args:
        tokens: Tokens as stored on a role or user
        source: Label for log events (e.g., the role name)

    Returns:
        Deduplicated set of granted tokens
    """
    granted: set[str] = set()
    for token in tokens or ():
        if not is_valid_permission(token):
            logger.warning(
                "unknown_permission_ignored",
                permission=token,
                source=source,
            )
            continue
        granted |= implied_permissions(token)
    return frozenset(granted)


def resolve_role_permissions(role: "Role | None") -> frozenset[str]:
    """Compute the effective permission set of a role.

    System roles receive the whole catalog. A role with no stored
    permissions and no system flag resolves to the empty set.
    """
    if role is None:
        return frozenset()
    if is_protected(role):
        return ALL_PERMISSIONS
    return expand_permissions(role.permissions, source=f"role:{role.name}")


def _direct_permissions(user: "User") -> list[str]:
    return list(getattr(user, "extra_permissions", None) or [])


def resolve_user_permissions(user: "User | None") -> frozenset[str]:
    """Effective permissions of a user: role grants plus direct grants."""
    if user is None:
        return frozenset()
    role_permissions = resolve_role_permissions(user.role)
    direct = expand_permissions(_direct_permissions(user), source=f"user:{user.id}")
    return role_permissions | direct


def has_system_access(user: "User | None") -> bool:
    """Whether the user holds the protected role or ``SYSTEM.ADMIN``."""
    if user is None:
        return False
    if is_protected(user.role):
        return True
    return ALL_PERMISSIONS <= resolve_user_permissions(user)


def is_granted(permission: str, granted: frozenset[str]) -> bool:
    """Check a required token against a resolved permission set.

    System tokens must be held themselves; ``resource.OPERATION``
    tokens need every permission the operation implies, so
    ``article.ALL`` requires all four CRUD grants.
    """
    if is_system_permission(permission):
        return permission in granted
    required = implied_permissions(permission)
    return bool(required) and required <= granted


def get_effective_permissions(user: "User") -> EffectivePermissions:
    """Summarize where a user's permissions come from."""
    role = user.role
    return EffectivePermissions(
        role_permissions=sorted(resolve_role_permissions(role)),
        direct_permissions=sorted(_direct_permissions(user)),
        all_permissions=sorted(resolve_user_permissions(user)),
        has_system_access=has_system_access(user),
    )
