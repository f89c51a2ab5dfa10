"""Application exceptions.

Services raise these; the handlers in ``handlers.py`` render them as
RFC 7807 Problem Details. Keys in ``details`` become extra members of
the response body, which is how a denial carries its
``required_permission``.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Message shown to the user as the problem ``detail``
        error_code: Machine-readable code, e.g. "role_in_use"
        status_code: HTTP status code for the response
        details: Extra members for the problem body
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """A user or role id that names nothing.

    Example:
        raise NotFoundError("Role not found", resource="role", resource_id=str(role_id))
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """The change clashes with stored data: a taken email or role name,
    or a role that users still hold.
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Request data that parses but breaks a business rule."""

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """No valid bearer token, or it names no active user."""

    message = "authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """The acting user is known but may not do this."""

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class PermissionDeniedError(ForbiddenError):
    """A permission check denied the action.

    The checker's reason becomes the message unchanged.

    Example:
        raise PermissionDeniedError("cannot delete your own account", "user.DELETE")
    """

    error_code = "permission_denied"

    def __init__(
        self,
        reason: str,
        required_permission: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        details["required_permission"] = required_permission
        super().__init__(message=reason, details=details, **kwargs)
