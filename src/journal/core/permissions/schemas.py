"""Value types passed into and returned from permission checks."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PermissionContext(BaseModel):
    """Context for evaluating self-access and target-user rules.

    Attributes:
        resource_id: Id of the resource being acted on (a user id for
            ``user.*`` permissions)
        actor_id: Id of the acting user; defaults to the checked user
        self_service: True only on the profile-settings flow, where a
            user edits their own account outside the admin interface
    """

    model_config = ConfigDict(frozen=True)

    resource_id: UUID | None = None
    actor_id: UUID | None = None
    self_service: bool = False


class PermissionCheckResult(BaseModel):
    """Outcome of a single permission check.

    ``reason`` is user-presentable and only set on denial.
    """

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str | None = None
    required_permission: str | None = None

    @classmethod
    def allow(cls) -> "PermissionCheckResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, permission: str | None = None) -> "PermissionCheckResult":
        return cls(allowed=False, reason=reason, required_permission=permission)


class EffectivePermissions(BaseModel):
    """Breakdown of a user's permissions for display and debugging."""

    role_permissions: list[str]
    direct_permissions: list[str]
    all_permissions: list[str]
    has_system_access: bool
