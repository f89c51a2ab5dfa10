"""Pydantic schemas for role operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from journal.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ROLE_NAME_LENGTH
from journal.core.permissions.catalog import validate_permission_tokens


class RoleCreate(BaseModel):
    """Schema for creating a role."""

    name: str = Field(..., min_length=2, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    rank: int = Field(0, ge=0)
    is_system: bool = False
    permissions: list[str] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def known_permissions(cls, v: list[str]) -> list[str]:
        """Only catalog tokens can be stored on a role."""
        return validate_permission_tokens(v)


class RoleUpdate(BaseModel):
    """Schema for updating a role. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=2, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    rank: int | None = Field(None, ge=0)
    is_system: bool | None = None
    permissions: list[str] | None = None

    @field_validator("permissions")
    @classmethod
    def known_permissions(cls, v: list[str] | None) -> list[str] | None:
        """Only catalog tokens can be stored on a role."""
        if v is None:
            return v
        return validate_permission_tokens(v)


class RoleResponse(BaseModel):
    """Schema for role response data."""

    id: UUID
    name: str
    key: str | None = None
    description: str | None
    rank: int
    is_system: bool
    permissions: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
