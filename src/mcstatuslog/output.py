# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Append-only status log file."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from mcstatuslog.constants import LOG_FILE_TIME_FORMAT
from mcstatuslog.errors import LogWriteError
from mcstatuslog.logging import get_logger

logger = get_logger(__name__)


def default_log_path(address: str, now: datetime | None = None) -> Path:
    """``<address>-<YYYY-mm-dd_HH-MM-SS>.log`` in the working directory."""
    now = now or datetime.now()
    return Path(f"{address}-{now.strftime(LOG_FILE_TIME_FORMAT)}.log")


class StatusLog:
    """Writes each entry as a discrete append; nothing is buffered between writes.

    I/O errors propagate as ``LogWriteError``.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.writes = 0

    def touch(self) -> None:
        """Create the file if absent without writing anything."""
        self._write("")

    def append(self, text: str) -> None:
        self._write(text)
        self.writes += 1
        logger.debug("status_log_appended", path=str(self.path), chars=len(text))

    def _write(self, text: str) -> None:
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(text)
                f.flush()
        except OSError as e:
            raise LogWriteError(str(self.path), e.strerror or str(e)) from e
