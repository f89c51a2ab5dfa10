"""User database model."""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from journal.core.database.base import Base, TimestampMixin, UUIDMixin


if TYPE_CHECKING:
    from journal.core.permissions.models import Role


class User(Base, UUIDMixin, TimestampMixin):
    """User of the journal administration.

    Every user holds exactly one role. ``extra_permissions`` are tokens
    granted directly to the user on top of that role.

    Attributes:
        email: Unique email address
        password_hash: Bcrypt-hashed password
        full_name: User's full name
        is_active: Whether the user can authenticate
        role_id: The user's role
        extra_permissions: Directly granted permission tokens
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    full_name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    extra_permissions: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    role: Mapped["Role"] = relationship(
        "Role",
        back_populates="users",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role_id={self.role_id})>"
