"""structlog configuration shared by the API and the CLI."""

import logging

import structlog

from journal.config import settings


def configure_logging(json_logs: bool | None = None) -> None:
    """Configure structlog processors and level from settings.

    Args:
        json_logs: Force JSON output; defaults to on in production
    """
    if json_logs is None:
        json_logs = settings.is_production

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if json_logs
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
