# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared constants for mcstatuslog."""

from __future__ import annotations

# Default ports
DEFAULT_JAVA_PORT = 25565
DEFAULT_BEDROCK_PORT = 19132

# Polling defaults (seconds)
DEFAULT_INTERVAL_S = 20
DEFAULT_TIMEOUT_S = 10

# Client limits
DEFAULT_MAX_PARALLEL = 10

# Java status protocol
JAVA_PROTOCOL_VERSION = 767
JAVA_NEXT_STATE_STATUS = 1
JAVA_MAX_PACKET_SIZE = 2 * 1024 * 1024
VARINT_MAX_BYTES = 5

# Java packet ids (status state)
PACKET_HANDSHAKE = 0x00
PACKET_STATUS_REQUEST = 0x00
PACKET_STATUS_RESPONSE = 0x00
PACKET_PING = 0x01
PACKET_PONG = 0x01

# Bedrock / RakNet offline messages
RAKNET_UNCONNECTED_PING = 0x01
RAKNET_UNCONNECTED_PONG = 0x1C
RAKNET_MAGIC = bytes.fromhex("00ffff00fefefefefdfdfdfd12345678")

# Bedrock reply layout
BEDROCK_FIELD_DELIMITER = ";"
BEDROCK_MANDATORY_FIELDS = 13

# Log file name timestamp
LOG_FILE_TIME_FORMAT = "%Y-%m-%d_%H-%M-%S"
