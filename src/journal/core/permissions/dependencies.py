"""FastAPI dependencies for permission checking."""

from typing import Annotated

from fastapi import Depends

from journal.api.dependencies import DBSession
from journal.core.permissions.checker import PermissionChecker
from journal.core.permissions.directory import SQLPermissionDirectory


def get_permission_checker(db: DBSession) -> PermissionChecker:
    """Build a checker bound to the request's database session."""
    return PermissionChecker(SQLPermissionDirectory(db))


PermissionCheckerDep = Annotated[PermissionChecker, Depends(get_permission_checker)]
