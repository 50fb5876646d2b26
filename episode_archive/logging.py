"""Structured logging helpers."""

from __future__ import annotations

import logging

import structlog

from episode_archive.config import ArchiveSettings, get_settings


def configure_logging(settings: ArchiveSettings | None = None) -> None:
    """Set up JSON logs at the configured level, tagged with the environment."""

    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(environment=settings.environment)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()

__all__ = ["configure_logging", "logger"]
