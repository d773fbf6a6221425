# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Status query protocols for Java and Bedrock edition servers."""

from __future__ import annotations

from mcstatuslog.protocol.base import StatusProtocol
from mcstatuslog.protocol.bedrock import BedrockStatusProtocol, parse_bedrock_reply
from mcstatuslog.protocol.java import JavaStatusProtocol, decode_java_status

__all__ = [
    "BedrockStatusProtocol",
    "JavaStatusProtocol",
    "StatusProtocol",
    "decode_java_status",
    "parse_bedrock_reply",
]
