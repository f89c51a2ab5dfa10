"""Structured logging setup and request tracking."""

from journal.core.logging.config import configure_logging
from journal.core.logging.middleware import RequestLoggingMiddleware


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]
