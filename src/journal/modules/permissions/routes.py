"""Permission API routes."""

from journal.api.dependencies import DBSession
from journal.core.auth.dependencies import CurrentUser, OptionalUser
from journal.core.permissions.catalog import ROLE_READ, catalog_entries
from journal.core.permissions.decorators import require_permission
from journal.core.permissions.dependencies import PermissionCheckerDep
from journal.core.permissions.schemas import (
    EffectivePermissions,
    PermissionCheckResult,
    PermissionContext,
)
from journal.modules.permissions import router
from journal.modules.permissions.schemas import (
    CatalogEntryResponse,
    PermissionCheckRequest,
)


@router.get(
    "/catalog",
    response_model=list[CatalogEntryResponse],
    summary="Permission catalog",
    description="Every grantable permission, grouped by resource. Requires role.READ.",
)
@require_permission(ROLE_READ)
async def get_catalog(
    current_user: CurrentUser,  # noqa: ARG001 - read by the permission guard
    db: DBSession,  # noqa: ARG001 - read by the permission guard
) -> list[CatalogEntryResponse]:
    """List the permission catalog."""
    return [CatalogEntryResponse.model_validate(entry) for entry in catalog_entries()]


@router.get(
    "/me",
    response_model=EffectivePermissions,
    summary="My permissions",
    description="The current user's permissions split by origin.",
)
async def get_my_permissions(
    current_user: CurrentUser,
    checker: PermissionCheckerDep,
) -> EffectivePermissions:
    """Get the current user's effective permissions."""
    return checker.get_effective_permissions(current_user)


@router.post(
    "/check",
    response_model=PermissionCheckResult,
    summary="Check a permission",
    description=(
        "Evaluate a permission for the current user without acting on it. "
        "Denials are returned, not raised."
    ),
)
async def check_permission(
    data: PermissionCheckRequest,
    current_user: OptionalUser,
    checker: PermissionCheckerDep,
) -> PermissionCheckResult:
    """Check whether the current user holds a permission."""
    context = None
    if current_user is not None and (data.resource_id or data.self_service):
        context = PermissionContext(
            resource_id=data.resource_id,
            actor_id=current_user.id,
            self_service=data.self_service,
        )
    return await checker.check(current_user, data.permission, context)
