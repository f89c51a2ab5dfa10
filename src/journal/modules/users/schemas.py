"""Pydantic schemas for user operations."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from journal.core.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from journal.core.permissions.catalog import validate_permission_tokens


# ============================================================
# Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"[A-Z]", "uppercase letter"),
    (r"[a-z]", "lowercase letter"),
    (r"\d", "digit"),
    (r"[!@#$%^&*(),.?\":{}|<>\[\]\;'`~_+\-=/]", "special character"),
]


def validate_password_complexity(password: str) -> str:
    """Validate password meets complexity requirements.

    Raises:
        ValueError: If password doesn't meet requirements
    """
    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


# ============================================================
# User Schemas
# ============================================================


class RoleSummary(BaseModel):
    """Role as embedded in user responses."""

    id: UUID
    name: str
    is_system: bool
    rank: int

    model_config = ConfigDict(from_attributes=True)


class UserBase(BaseModel):
    """Base schema for user data."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


class UserCreate(UserBase):
    """Schema for creating a user from the admin interface."""

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    role_id: UUID

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class UserUpdate(BaseModel):
    """Schema for admin edits of another user."""

    email: EmailStr | None = None
    full_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    is_active: bool | None = None


class ProfileUpdate(BaseModel):
    """Schema for a user editing their own account."""

    email: EmailStr | None = None
    full_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    password: str | None = Field(
        None, min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str | None) -> str | None:
        """Validate password complexity."""
        if v is None:
            return v
        return validate_password_complexity(v)


class RoleAssignment(BaseModel):
    """Schema for changing a user's role."""

    role_id: UUID


class PermissionGrant(BaseModel):
    """Schema for replacing a user's directly granted permissions."""

    permissions: list[str] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def known_permissions(cls, v: list[str]) -> list[str]:
        """Only catalog tokens can be granted."""
        return validate_permission_tokens(v)


class UserResponse(UserBase):
    """Schema for user response data."""

    id: UUID
    is_active: bool
    role: RoleSummary
    extra_permissions: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int = DEFAULT_PAGE_SIZE
