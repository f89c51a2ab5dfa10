"""Denial reasons shown to end users."""

AUTHENTICATION_REQUIRED = "authentication required"
INSUFFICIENT_PERMISSIONS = "insufficient permissions"
SYSTEM_ADMIN_REQUIRED = "system administrator privileges required"
UNKNOWN_PERMISSION = "unknown permission"
CONTEXT_ACTOR_MISMATCH = "permission context does not match the acting user"
SELF_DELETE_FORBIDDEN = "cannot delete your own account"
SELF_UPDATE_USE_PROFILE = "use your profile settings to update your own account"
PROTECTED_USER = "only system administrators can manage system users"
HIGHER_RANKED_USER = "cannot manage a user with a higher-privileged role"
LAST_SYSTEM_ADMIN = "cannot delete the last system administrator"
CHECK_FAILED = "permission check failed"
NO_PERMISSIONS_SPECIFIED = "no permissions specified"

# Assignment rules
PROTECTED_ROLE_ASSIGNMENT = "only system administrators can assign system roles"
HIGHER_RANKED_ROLE_ASSIGNMENT = "cannot assign a role above your own"
SYSTEM_PERMISSION_GRANT = "only system administrators can grant system permissions"

# Role administration
SYSTEM_ROLE_MANAGEMENT = "only system administrators can manage system roles"
HIGHER_RANKED_ROLE = "cannot manage a role above your own"
SYSTEM_ROLE_DELETE = "system roles cannot be deleted"
SYSTEM_ROLE_UNFLAG = "system roles cannot lose their system flag"
SYSTEM_ROLE_PERMISSIONS = "permissions of a system role cannot be edited"

# Reasons that carry no context about the target
GENERIC = frozenset({INSUFFICIENT_PERMISSIONS, SYSTEM_ADMIN_REQUIRED, UNKNOWN_PERMISSION})
