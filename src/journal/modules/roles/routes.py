"""Role API routes."""

from uuid import UUID

from fastapi import status

from journal.core.auth.dependencies import CurrentUser
from journal.modules.roles import router
from journal.modules.roles.schemas import RoleCreate, RoleResponse, RoleUpdate
from journal.modules.roles.services import RoleSvc


@router.get(
    "",
    response_model=list[RoleResponse],
    summary="List roles",
    description="List every role, most privileged first. Requires role.READ.",
)
async def list_roles(current_user: CurrentUser, service: RoleSvc) -> list[RoleResponse]:
    """List roles."""
    roles = await service.list_roles(current_user)
    return [RoleResponse.model_validate(r) for r in roles]


@router.get(
    "/assignable",
    response_model=list[RoleResponse],
    summary="List assignable roles",
    description="Roles the current user may assign to other users.",
)
async def list_assignable_roles(
    current_user: CurrentUser, service: RoleSvc
) -> list[RoleResponse]:
    """List roles the current user may assign."""
    roles = await service.list_assignable(current_user)
    return [RoleResponse.model_validate(r) for r in roles]


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    description="Create a role. Requires role.CREATE.",
)
async def create_role(
    data: RoleCreate, current_user: CurrentUser, service: RoleSvc
) -> RoleResponse:
    """Create a role."""
    role = await service.create_role(current_user, data)
    return RoleResponse.model_validate(role)


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Get role",
    description="Get a role by ID. Requires role.READ.",
)
async def get_role(
    role_id: UUID, current_user: CurrentUser, service: RoleSvc
) -> RoleResponse:
    """Get a role."""
    role = await service.get_role(current_user, role_id)
    return RoleResponse.model_validate(role)


@router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update role",
    description="Update a role. Requires role.UPDATE.",
)
async def update_role(
    role_id: UUID,
    data: RoleUpdate,
    current_user: CurrentUser,
    service: RoleSvc,
) -> RoleResponse:
    """Update a role."""
    role = await service.update_role(current_user, role_id, data)
    return RoleResponse.model_validate(role)


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete role",
    description="Delete a role no user holds. Requires role.DELETE.",
)
async def delete_role(role_id: UUID, current_user: CurrentUser, service: RoleSvc) -> None:
    """Delete a role."""
    await service.delete_role(current_user, role_id)
