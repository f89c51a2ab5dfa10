"""Role database model.

Roles are named bundles of permission tokens. A role flagged
``is_system`` is the protected, top-rank role: it resolves to the full
catalog and only its holders may manage it. ``rank`` orders the
remaining roles so lesser roles cannot manage users above them.
"""

from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ROLE_NAME_LENGTH
from journal.core.database.base import Base, TimestampMixin, UUIDMixin


if TYPE_CHECKING:
    from journal.modules.users.models import User


class Role(Base, UUIDMixin, TimestampMixin):
    """Role model representing a named set of permissions.

    Attributes:
        name: Display name (e.g., "Super Admin", "Editor"); editable content
        key: Stable identifier of a built-in role, None for custom roles
        description: Human-readable description of the role
        is_system: Whether this is the protected top-rank role
        rank: Privilege ordinal, higher is more privileged
        permissions: Ordered list of permission tokens
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    key: Mapped[str | None] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=True,
        unique=True,
    )
    is_system: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    rank: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    permissions: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="role",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name}, is_system={self.is_system})>"
