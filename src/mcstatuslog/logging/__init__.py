# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Diagnostic logging for mcstatuslog."""

from __future__ import annotations

from mcstatuslog.logging.config import configure_logging, get_logger, resolve_level

__all__ = ["configure_logging", "get_logger", "resolve_level"]
