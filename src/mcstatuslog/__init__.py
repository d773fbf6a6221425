# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Periodic Minecraft server status poller and change logger."""

from __future__ import annotations

from mcstatuslog.address import ServerAddress
from mcstatuslog.client import ClientConfig, McClient
from mcstatuslog.errors import (
    ConnectionFailure,
    DecodeFailure,
    InvalidAddress,
    LogWriteError,
    McStatusError,
    PollTimeout,
    ProtocolError,
)
from mcstatuslog.models import BedrockStatus, Edition, JavaStatus, ServerStatus
from mcstatuslog.poller import OutputMode, PollConfig, Poller, PollState

__version__ = "0.3.0"

__all__ = [
    "BedrockStatus",
    "ClientConfig",
    "ConnectionFailure",
    "DecodeFailure",
    "Edition",
    "InvalidAddress",
    "JavaStatus",
    "LogWriteError",
    "McClient",
    "McStatusError",
    "OutputMode",
    "PollConfig",
    "PollState",
    "PollTimeout",
    "Poller",
    "ProtocolError",
    "ServerAddress",
    "ServerStatus",
]
