"""Permission catalog.

The closed set of permission tokens understood by the checker.

Tokens take two forms:
    - ``resource.OPERATION`` for fine-grained access, e.g. ``article.CREATE``
    - ``SYSTEM.NAME`` for coarse system permissions, e.g. ``SYSTEM.USER_MANAGEMENT``

Anything outside the catalog is never granted.
"""

from dataclasses import dataclass, field


SYSTEM_PREFIX = "SYSTEM"

# Operations
CREATE = "CREATE"
READ = "READ"
UPDATE = "UPDATE"
DELETE = "DELETE"
ALL = "ALL"

CRUD_OPERATIONS: tuple[str, ...] = (CREATE, READ, UPDATE, DELETE)
OPERATIONS: tuple[str, ...] = (*CRUD_OPERATIONS, ALL)

# Holding the key operation also grants the listed ones
OPERATION_HIERARCHY: dict[str, tuple[str, ...]] = {
    ALL: CRUD_OPERATIONS,
    CREATE: (CREATE,),
    READ: (READ,),
    UPDATE: (READ, UPDATE),
    DELETE: (READ, DELETE),
}

RESOURCES: tuple[str, ...] = (
    "article",
    "author",
    "boardadvisor",
    "callforpapers",
    "category",
    "editorialboard",
    "journalissue",
    "media",
    "notification",
    "post",
    "role",
    "user",
)

RESOURCE_LABELS: dict[str, str] = {
    "article": "Journal articles",
    "author": "Authors",
    "boardadvisor": "Board of advisors",
    "callforpapers": "Calls for papers",
    "category": "Categories",
    "editorialboard": "Editorial board",
    "journalissue": "Journal issues",
    "media": "Media library",
    "notification": "Notifications",
    "post": "Blog posts",
    "role": "Roles",
    "user": "Users",
}


def make_permission(resource: str, operation: str) -> str:
    """Build a ``resource.OPERATION`` token."""
    return f"{resource}.{operation}"


# Frequently referenced tokens
USER_CREATE = make_permission("user", CREATE)
USER_READ = make_permission("user", READ)
USER_UPDATE = make_permission("user", UPDATE)
USER_DELETE = make_permission("user", DELETE)
ROLE_CREATE = make_permission("role", CREATE)
ROLE_READ = make_permission("role", READ)
ROLE_UPDATE = make_permission("role", UPDATE)
ROLE_DELETE = make_permission("role", DELETE)

SYSTEM_ADMIN = "SYSTEM.ADMIN"
SYSTEM_USER_MANAGEMENT = "SYSTEM.USER_MANAGEMENT"
SYSTEM_ROLE_MANAGEMENT = "SYSTEM.ROLE_MANAGEMENT"
SYSTEM_SETTINGS = "SYSTEM.SETTINGS"
SYSTEM_ANALYTICS = "SYSTEM.ANALYTICS"
SYSTEM_BACKUP = "SYSTEM.BACKUP"

SYSTEM_PERMISSIONS: tuple[str, ...] = (
    SYSTEM_ADMIN,
    SYSTEM_USER_MANAGEMENT,
    SYSTEM_ROLE_MANAGEMENT,
    SYSTEM_SETTINGS,
    SYSTEM_ANALYTICS,
    SYSTEM_BACKUP,
)

SYSTEM_PERMISSION_LABELS: dict[str, str] = {
    SYSTEM_ADMIN: "Full system administration",
    SYSTEM_USER_MANAGEMENT: "Manage user accounts",
    SYSTEM_ROLE_MANAGEMENT: "Manage roles",
    SYSTEM_SETTINGS: "Change site settings",
    SYSTEM_ANALYTICS: "View analytics",
    SYSTEM_BACKUP: "Backup and restore",
}

FINE_GRAINED_PERMISSIONS: frozenset[str] = frozenset(
    make_permission(resource, operation)
    for resource in RESOURCES
    for operation in CRUD_OPERATIONS
)

# Every grantable outcome of the catalog; what a system role resolves to
ALL_PERMISSIONS: frozenset[str] = FINE_GRAINED_PERMISSIONS | frozenset(
    SYSTEM_PERMISSIONS
)


def _resource_permissions(resource: str) -> frozenset[str]:
    return frozenset(make_permission(resource, op) for op in CRUD_OPERATIONS)


_SYSTEM_EXPANSIONS: dict[str, frozenset[str]] = {
    SYSTEM_ADMIN: ALL_PERMISSIONS,
    SYSTEM_USER_MANAGEMENT: _resource_permissions("user"),
    SYSTEM_ROLE_MANAGEMENT: _resource_permissions("role"),
    SYSTEM_SETTINGS: frozenset(),
    SYSTEM_ANALYTICS: frozenset(),
    SYSTEM_BACKUP: frozenset(),
}


def parse_permission(token: str) -> tuple[str, str] | None:
    """Split a token into ``(resource, operation)``.

    Returns None for malformed tokens. System tokens parse as
    ``("SYSTEM", NAME)``.
    """
    if not isinstance(token, str):
        return None
    parts = token.split(".")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def is_system_permission(token: str) -> bool:
    """Check whether a token is one of the catalog's system permissions."""
    return token in _SYSTEM_EXPANSIONS


def is_valid_permission(token: str) -> bool:
    """Check whether a token belongs to the catalog.

    Args:
        token: The permission token to validate

    Returns:
        True for known system tokens and known ``resource.OPERATION``
        pairs (including ``resource.ALL``), False otherwise
    """
    if is_system_permission(token):
        return True
    parsed = parse_permission(token)
    if parsed is None:
        return False
    resource, operation = parsed
    return resource in RESOURCES and operation in OPERATIONS


def validate_permission_tokens(tokens: list[str]) -> list[str]:
    """Reject tokens outside the catalog and drop duplicates, keeping order.

    Raises:
        ValueError: If any token is unknown
    """
    unknown = [token for token in tokens if not is_valid_permission(token)]
    if unknown:
        raise ValueError(f"Unknown permissions: {', '.join(unknown)}")
    return list(dict.fromkeys(tokens))


def expand_system_permission(token: str) -> frozenset[str]:
    """Return the tokens a system permission subsumes, itself included.

    Unknown and non-system tokens expand to the empty set.
    """
    if not is_system_permission(token):
        return frozenset()
    return _SYSTEM_EXPANSIONS[token] | {token}


def implied_permissions(token: str) -> frozenset[str]:
    """Return every token granted by holding ``token``.

    Applies system expansion and the operation hierarchy
    (``ALL`` grants CRUD, ``UPDATE``/``DELETE`` grant ``READ``).
    Invalid tokens imply nothing.
    """
    if is_system_permission(token):
        return expand_system_permission(token)
    if not is_valid_permission(token):
        return frozenset()
    resource, operation = token.split(".")
    return frozenset(
        make_permission(resource, op) for op in OPERATION_HIERARCHY[operation]
    )


def subsuming_system_permissions(token: str) -> tuple[str, ...]:
    """List the system permissions that would grant ``token``."""
    return tuple(
        system
        for system in SYSTEM_PERMISSIONS
        if system != token and token in _SYSTEM_EXPANSIONS[system]
    )


@dataclass(frozen=True)
class CatalogEntry:
    """One row of the catalog for display purposes."""

    permission: str
    label: str
    category: str
    implies: tuple[str, ...] = field(default_factory=tuple)


def catalog_entries() -> list[CatalogEntry]:
    """List the catalog grouped by resource, system permissions last."""
    entries: list[CatalogEntry] = []
    for resource in RESOURCES:
        label = RESOURCE_LABELS[resource]
        for operation in OPERATIONS:
            token = make_permission(resource, operation)
            implied = sorted(implied_permissions(token) - {token})
            entries.append(
                CatalogEntry(
                    permission=token,
                    label=f"{operation.title()} {label.lower()}",
                    category=label,
                    implies=tuple(implied),
                )
            )
    for token in SYSTEM_PERMISSIONS:
        implied = sorted(expand_system_permission(token) - {token})
        entries.append(
            CatalogEntry(
                permission=token,
                label=SYSTEM_PERMISSION_LABELS[token],
                category="System",
                implies=tuple(implied),
            )
        )
    return entries


@dataclass(frozen=True)
class RoleDefinition:
    """Seed definition of a built-in role.

    ``key`` identifies the role across renames; ``name`` is only its
    initial display name.
    """

    key: str
    name: str
    description: str
    rank: int
    permissions: tuple[str, ...]
    is_system: bool = False


DEFAULT_ROLES: tuple[RoleDefinition, ...] = (
    RoleDefinition(
        key="super_admin",
        name="Super Admin",
        description="Unrestricted access, including roles and system settings",
        rank=6,
        permissions=(SYSTEM_ADMIN,),
        is_system=True,
    ),
    RoleDefinition(
        key="admin",
        name="Admin",
        description="Manages users, roles and all journal content",
        rank=5,
        permissions=(
            SYSTEM_USER_MANAGEMENT,
            SYSTEM_ROLE_MANAGEMENT,
            "article.ALL",
            "author.ALL",
            "journalissue.ALL",
            "callforpapers.ALL",
            "notification.ALL",
            "media.ALL",
            "category.ALL",
            "editorialboard.ALL",
            "boardadvisor.ALL",
            "post.ALL",
        ),
    ),
    RoleDefinition(
        key="editor",
        name="Editor",
        description="Edits articles and publishes notifications",
        rank=4,
        permissions=(
            "article.ALL",
            "author.READ",
            "author.CREATE",
            "journalissue.READ",
            "notification.CREATE",
            "notification.READ",
            "notification.UPDATE",
            "media.ALL",
            "category.READ",
        ),
    ),
    RoleDefinition(
        key="author",
        name="Author",
        description="Submits articles and uploads media",
        rank=3,
        permissions=(
            "article.CREATE",
            "article.READ",
            "author.READ",
            "media.CREATE",
            "media.READ",
        ),
    ),
    RoleDefinition(
        key="reviewer",
        name="Reviewer",
        description="Reads submitted articles for review",
        rank=2,
        permissions=("article.READ", "author.READ", "journalissue.READ"),
    ),
    RoleDefinition(
        key="viewer",
        name="Viewer",
        description="Read-only access to published content",
        rank=1,
        permissions=(
            "article.READ",
            "author.READ",
            "journalissue.READ",
            "notification.READ",
        ),
    ),
)
