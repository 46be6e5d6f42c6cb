"""
Structured logging setup (structlog on top of stdlib logging).

Usage:
    from integration_service.core.logging import get_logger, setup_logging

    setup_logging("DEBUG")          # once, at startup
    logger = get_logger(__name__)
    logger.info("Batch mapping started", batch_id=batch_id, rows=12)
"""

from __future__ import annotations

import logging
import sys

import structlog

from integration_service.core.config import settings


def setup_logging(level: str = "INFO", json_logs: bool | None = None) -> None:
    """
    Configure structlog + stdlib logging.

    Args:
        level: Root log level name.
        json_logs: Render JSON lines instead of the console renderer.
                   Defaults to JSON everywhere except development.
    """
    if json_logs is None:
        json_logs = settings.APP_ENV != "development"

    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to `name`."""
    return structlog.get_logger(name)
