"""Data access used by the permission checker.

The checker only needs two reads: the user a check targets and the
number of users holding the protected role. They sit behind a small
protocol so the checker can be exercised without a database.
"""

from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from journal.core.permissions.models import Role


if TYPE_CHECKING:
    from journal.modules.users.models import User


class PermissionDirectory(Protocol):
    """Reads the checker needs from the data store."""

    async def get_user(self, user_id: UUID) -> "User | None": ...

    async def count_protected_users(self) -> int: ...


class SQLPermissionDirectory:
    """PermissionDirectory backed by an async SQLAlchemy session.

    Reads are not cached: role membership can change between requests.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_user(self, user_id: UUID) -> "User | None":
        """Load a user with their role.

        Args:
            user_id: The user's UUID

        Returns:
            The user, or None if it does not exist
        """
        from journal.modules.users.models import User  # noqa: PLC0415

        stmt = select(User).where(User.id == user_id).options(selectinload(User.role))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_protected_users(self) -> int:
        """Count users whose role is flagged as the protected role."""
        from journal.modules.users.models import User  # noqa: PLC0415

        stmt = (
            select(func.count())
            .select_from(User)
            .join(Role, User.role_id == Role.id)
            .where(Role.is_system.is_(True))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()
