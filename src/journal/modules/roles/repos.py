"""Role repository for database operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select

from journal.api.dependencies import DBSession
from journal.core.permissions.models import Role


class RoleRepository:
    """Repository for Role database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, role: Role) -> Role:
        """Create a new role."""
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get a role by ID."""
        result = await self.session.execute(select(Role).where(Role.id == role_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Role | None:
        """Get a role by its display name."""
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def get_system_role(self) -> Role | None:
        """Get the highest-ranked protected role, if one exists."""
        stmt = (
            select(Role)
            .where(Role.is_system.is_(True))
            .order_by(Role.rank.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self) -> list[Role]:
        """List all roles, most privileged first."""
        result = await self.session.execute(
            select(Role).order_by(Role.rank.desc(), Role.name)
        )
        return list(result.scalars().all())

    async def update(self, role: Role) -> Role:
        """Flush pending changes to a role."""
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def delete(self, role: Role) -> None:
        """Delete a role."""
        await self.session.delete(role)
        await self.session.flush()


# Type alias for dependency injection
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
