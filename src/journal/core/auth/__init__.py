"""Authentication: password hashing, access tokens and the request user."""

from journal.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
)
from journal.core.auth.dependencies import (
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_optional_user,
)
from journal.core.auth.middleware import RequestIdMiddleware, UserContextMiddleware
from journal.core.auth.schemas import TokenData


__all__ = [
    "CurrentUser",
    "OptionalUser",
    "RequestIdMiddleware",
    "TokenData",
    "UserContextMiddleware",
    "create_access_token",
    "decode_token",
    "get_current_user",
    "get_optional_user",
    "hash_password",
]
