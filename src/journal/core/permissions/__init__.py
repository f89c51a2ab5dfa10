"""Role-based permission system.

Permissions are ``resource.OPERATION`` tokens (``article.CREATE``) or
system tokens (``SYSTEM.ADMIN``). Users get them from their role and
from direct grants; ``PermissionChecker`` is the only place that turns
them into an allow or deny decision.
"""

from journal.core.permissions.catalog import (
    ALL_PERMISSIONS,
    DEFAULT_ROLES,
    RESOURCES,
    SYSTEM_PERMISSIONS,
    catalog_entries,
    expand_system_permission,
    implied_permissions,
    is_system_permission,
    is_valid_permission,
    parse_permission,
)
from journal.core.permissions.checker import (
    Authorizer,
    PermissionChecker,
    assignable_roles,
    check_permission,
    check_permission_grant,
    check_role_assignment,
    evaluate_permission,
    raise_for_denial,
)
from journal.core.permissions.decorators import (
    require_all_permissions,
    require_any_permission,
    require_permission,
)
from journal.core.permissions.directory import (
    PermissionDirectory,
    SQLPermissionDirectory,
)
from journal.core.permissions.models import Role
from journal.core.permissions.resolver import (
    get_effective_permissions,
    has_system_access,
    is_protected,
    resolve_role_permissions,
    resolve_user_permissions,
)
from journal.core.permissions.schemas import (
    EffectivePermissions,
    PermissionCheckResult,
    PermissionContext,
)


__all__ = [
    "ALL_PERMISSIONS",
    "DEFAULT_ROLES",
    "RESOURCES",
    "SYSTEM_PERMISSIONS",
    "Authorizer",
    "EffectivePermissions",
    "PermissionCheckResult",
    "PermissionChecker",
    "PermissionContext",
    "PermissionDirectory",
    "Role",
    "SQLPermissionDirectory",
    "assignable_roles",
    "catalog_entries",
    "check_permission",
    "check_permission_grant",
    "check_role_assignment",
    "evaluate_permission",
    "expand_system_permission",
    "get_effective_permissions",
    "has_system_access",
    "implied_permissions",
    "is_protected",
    "is_system_permission",
    "is_valid_permission",
    "parse_permission",
    "raise_for_denial",
    "require_all_permissions",
    "require_any_permission",
    "require_permission",
    "resolve_role_permissions",
    "resolve_user_permissions",
]
