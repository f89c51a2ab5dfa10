"""User API routes.

``/users/me`` is the profile-settings surface: a user may edit their own
account there but never through ``/users/{user_id}``.
"""

from uuid import UUID

from fastapi import Query, status

from journal.core.auth.dependencies import CurrentUser
from journal.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from journal.modules.users import router
from journal.modules.users.schemas import (
    PermissionGrant,
    ProfileUpdate,
    RoleAssignment,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from journal.modules.users.services import UserSvc


# ============================================================
# Profile Routes
# ============================================================


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="Returns the currently authenticated user's profile.",
)
async def get_me(current_user: CurrentUser, service: UserSvc) -> UserResponse:
    """Get current user profile."""
    user = await service.get_user(current_user, current_user.id)
    return UserResponse.model_validate(user)


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update current user",
    description="Update the currently authenticated user's own account.",
)
async def update_me(
    data: ProfileUpdate,
    current_user: CurrentUser,
    service: UserSvc,
) -> UserResponse:
    """Update current user profile."""
    user = await service.update_profile(current_user, data)
    return UserResponse.model_validate(user)


# ============================================================
# User Administration Routes
# ============================================================


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users. Requires user.READ.",
)
async def list_users(
    service: UserSvc,
    current_user: CurrentUser,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"
    ),
) -> UserListResponse:
    """List users."""
    users, total = await service.list_users(current_user, page, page_size)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create a user with a role. Requires user.CREATE.",
)
async def create_user(
    data: UserCreate,
    current_user: CurrentUser,
    service: UserSvc,
) -> UserResponse:
    """Create a user."""
    user = await service.create_user(current_user, data)
    return UserResponse.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user",
    description="Get a user by ID. Requires user.READ unless reading yourself.",
)
async def get_user(
    user_id: UUID,
    current_user: CurrentUser,
    service: UserSvc,
) -> UserResponse:
    """Get user by ID."""
    user = await service.get_user(current_user, user_id)
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="Edit another user. Requires user.UPDATE.",
)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    current_user: CurrentUser,
    service: UserSvc,
) -> UserResponse:
    """Update a user."""
    user = await service.update_user(current_user, user_id, data)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    description="Delete another user. Requires user.DELETE.",
)
async def delete_user(
    user_id: UUID,
    current_user: CurrentUser,
    service: UserSvc,
) -> None:
    """Delete a user."""
    await service.delete_user(current_user, user_id)


@router.put(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="Assign role",
    description="Give a user a different role. Requires user.UPDATE.",
)
async def assign_role(
    user_id: UUID,
    data: RoleAssignment,
    current_user: CurrentUser,
    service: UserSvc,
) -> UserResponse:
    """Assign a role to a user."""
    user = await service.assign_role(current_user, user_id, data.role_id)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}/permissions",
    response_model=UserResponse,
    summary="Set direct permissions",
    description="Replace the permissions granted directly to a user. Requires user.UPDATE.",
)
async def set_user_permissions(
    user_id: UUID,
    data: PermissionGrant,
    current_user: CurrentUser,
    service: UserSvc,
) -> UserResponse:
    """Replace a user's direct permissions."""
    user = await service.update_user_permissions(current_user, user_id, data.permissions)
    return UserResponse.model_validate(user)
