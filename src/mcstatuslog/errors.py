# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for status polling."""

from __future__ import annotations


class McStatusError(Exception):
    """Base exception for mcstatuslog."""


class InvalidAddress(McStatusError, ValueError):
    """Host is neither an IP literal nor a valid hostname."""

    def __init__(self, host: str) -> None:
        super().__init__(f"Invalid IP address or hostname: {host!r}")
        self.host = host


class ProtocolError(McStatusError):
    """A single status poll failed.

    Codec helpers raise without an address; the client fills it in before
    the error leaves ``McClient.poll``.
    """

    def __init__(self, message: str, address: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.address = address

    def __str__(self) -> str:
        if self.address:
            return f"{self.address}: {self.message}"
        return self.message


class ConnectionFailure(ProtocolError):
    """Transport-level refusal, reset or unreachable host."""


class PollTimeout(ProtocolError):
    """Round trip exceeded the configured timeout."""

    def __init__(self, timeout: float, address: str | None = None) -> None:
        super().__init__(f"no response within {timeout:g}s", address)
        self.timeout = timeout


class DecodeFailure(ProtocolError):
    """Response did not conform to the expected protocol shape."""


class LogWriteError(McStatusError, OSError):
    """The status log file could not be created or appended to."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot write log file {path}: {reason}")
        self.path = path
        self.reason = reason
