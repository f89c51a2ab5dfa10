"""Pydantic schemas for permission endpoints."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from journal.core.constants import MAX_PERMISSION_LENGTH


class CatalogEntryResponse(BaseModel):
    """One grantable permission and what holding it implies."""

    permission: str
    label: str
    category: str
    implies: list[str]

    model_config = ConfigDict(from_attributes=True)


class PermissionCheckRequest(BaseModel):
    """Ask whether the current user may use a permission."""

    permission: str = Field(..., min_length=1, max_length=MAX_PERMISSION_LENGTH)
    resource_id: UUID | None = None
    self_service: bool = False
