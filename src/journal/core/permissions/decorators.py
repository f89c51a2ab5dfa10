"""Permission decorators for route protection.

The decorated route must declare ``current_user`` and ``db`` keyword
parameters. When ``resource_param`` is given, the value of that route
parameter becomes the ``resource_id`` of the check context, so the
self-access override rules apply.
"""

from collections.abc import Awaitable, Callable, Sequence
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

from journal.core.errors import UnauthorizedError
from journal.core.permissions import reasons
from journal.core.permissions.checker import PermissionChecker, raise_for_denial
from journal.core.permissions.directory import SQLPermissionDirectory
from journal.core.permissions.schemas import PermissionCheckResult, PermissionContext


if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from journal.modules.users.models import User


P = ParamSpec("P")
R = TypeVar("R")


def _get_user_and_db(
    kwargs: dict[str, Any],
) -> tuple["User | None", "AsyncSession | None"]:
    user = cast("User | None", kwargs.get("current_user"))
    db = cast("AsyncSession | None", kwargs.get("db"))
    return user, db


def _build_context(
    user: "User", kwargs: dict[str, Any], resource_param: str | None
) -> PermissionContext | None:
    if resource_param is None:
        return None
    return PermissionContext(resource_id=kwargs.get(resource_param), actor_id=user.id)


def _guard(
    permissions: Sequence[str],
    require_all: bool,
    resource_param: str | None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            user, db = _get_user_and_db(kwargs)

            if not user:
                raise UnauthorizedError(
                    reasons.AUTHENTICATION_REQUIRED,
                    error_code="auth_required",
                )

            if db is None:
                raise_for_denial(
                    PermissionCheckResult.deny(reasons.CHECK_FAILED, " OR ".join(permissions))
                )

            checker = PermissionChecker(SQLPermissionDirectory(db))  # type: ignore[arg-type]
            context = _build_context(user, kwargs, resource_param)

            if require_all:
                result = await checker.check_all(user, permissions, context)
            else:
                result = await checker.check_any(user, permissions, context)

            raise_for_denial(result)
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_permission(
    permission: str, resource_param: str | None = None
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires a specific permission to access a route.

    Usage:
        @router.delete("/articles/{article_id}")
        @require_permission("article.DELETE")
        async def delete_article(article_id: UUID, current_user: CurrentUser, db: DBSession):
            ...

    Args:
        permission: The permission token (e.g., "article.DELETE")
        resource_param: Name of the route parameter holding the target id

    Raises:
        UnauthorizedError: If there is no authenticated user
        ForbiddenError: If the check denies
    """
    return _guard([permission], require_all=True, resource_param=resource_param)


def require_any_permission(
    permissions: Sequence[str], resource_param: str | None = None
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires any one of the specified permissions.

    Usage:
        @router.get("/reports")
        @require_any_permission(["SYSTEM.ANALYTICS", "article.READ"])
        async def get_reports(current_user: CurrentUser, db: DBSession):
            ...
    """
    return _guard(list(permissions), require_all=False, resource_param=resource_param)


def require_all_permissions(
    permissions: Sequence[str], resource_param: str | None = None
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires all of the specified permissions."""
    return _guard(list(permissions), require_all=True, resource_param=resource_param)
