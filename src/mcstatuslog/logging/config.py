# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Diagnostic logging setup.

Status boxes own stdout, so structlog events go to stderr (or any stream
passed in). Level comes from MCSTATUSLOG_LOG_LEVEL, default WARNING.
Context bound with ``structlog.contextvars`` (the poller binds the
iteration number) is merged into every event.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from mcstatuslog.settings import Settings

__all__ = ["get_logger", "configure_logging", "resolve_level"]


def resolve_level(name: str) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names give WARNING."""
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.WARNING)


def configure_logging(settings: Settings | None = None, *, stream: TextIO | None = None) -> None:
    """Configure structlog for mcstatuslog.

    Call once at startup, before the poll loop runs.

    Args:
        settings: Settings instance (will be created if None)
        stream: Destination for log lines (default: stderr)
    """
    if settings is None:
        from mcstatuslog.settings import Settings

        settings = Settings()

    stream = stream or sys.stderr
    isatty = getattr(stream, "isatty", None)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty())),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(settings.log_level)),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)
