# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bedrock edition unconnected ping over UDP (RakNet offline messages)."""

from __future__ import annotations

import asyncio
import random
import struct
import time
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from mcstatuslog.constants import (
    BEDROCK_FIELD_DELIMITER,
    BEDROCK_MANDATORY_FIELDS,
    RAKNET_MAGIC,
    RAKNET_UNCONNECTED_PING,
    RAKNET_UNCONNECTED_PONG,
)
from mcstatuslog.errors import ConnectionFailure, DecodeFailure
from mcstatuslog.models import BedrockStatus, ServerStatus
from mcstatuslog.protocol.base import StatusProtocol

if TYPE_CHECKING:
    from mcstatuslog.address import ServerAddress

log = structlog.get_logger()

# Positional layout of the pong reply text; the first BEDROCK_MANDATORY_FIELDS are required.
BEDROCK_FIELDS = (
    "edition_label",
    "motd",
    "protocol_version",
    "version",
    "online_players",
    "max_players",
    "server_uid",
    "map",
    "game_mode",
    "game_mode_numeric",
    "port_ipv4",
    "port_ipv6",
    "motd2",
    "software",
)

# id(1) + time(8) + server guid(8) + magic(16) + text length(2)
_PONG_HEADER = struct.Struct(">BqQ16sH")


def build_unconnected_ping(timestamp: int, client_guid: int) -> bytes:
    return struct.pack(">Bq16sQ", RAKNET_UNCONNECTED_PING, timestamp, RAKNET_MAGIC, client_guid)


def parse_unconnected_pong(data: bytes) -> str:
    """Extract the server id string from an unconnected pong datagram.

    Raises:
        DecodeFailure: If the datagram is not a well-formed pong
    """
    if len(data) < _PONG_HEADER.size:
        raise DecodeFailure(f"pong too short: {len(data)} bytes")
    packet_id, _, _, magic, length = _PONG_HEADER.unpack_from(data)
    if packet_id != RAKNET_UNCONNECTED_PONG:
        raise DecodeFailure(f"expected unconnected pong 0x1c, got {packet_id:#04x}")
    if magic != RAKNET_MAGIC:
        raise DecodeFailure("pong carries a bad offline message magic")
    body = data[_PONG_HEADER.size : _PONG_HEADER.size + length]
    if len(body) < length:
        raise DecodeFailure(f"pong text truncated: expected {length} bytes, got {len(body)}")
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeFailure("pong text is not valid UTF-8") from e


def parse_bedrock_reply(text: str) -> BedrockStatus:
    """Parse the semicolon-delimited status text.

    The first 13 fields are mandatory; trailing fields may be omitted by the
    server and are then ``None``. An empty segment left by a terminating
    delimiter is dropped.

    Raises:
        DecodeFailure: If a mandatory field is missing or a numeric field is invalid
    """
    parts = text.split(BEDROCK_FIELD_DELIMITER)
    if len(parts) > BEDROCK_MANDATORY_FIELDS and parts[-1] == "":
        parts.pop()
    if len(parts) < BEDROCK_MANDATORY_FIELDS:
        raise DecodeFailure(f"expected at least {BEDROCK_MANDATORY_FIELDS} fields, got {len(parts)}")

    fields: dict[str, Any] = dict(zip(BEDROCK_FIELDS, parts))
    if len(parts) > len(BEDROCK_FIELDS):
        log.debug("bedrock_extra_fields_ignored", count=len(parts) - len(BEDROCK_FIELDS))

    try:
        return BedrockStatus.model_validate(fields)
    except ValidationError as e:
        bad = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise DecodeFailure(f"invalid Bedrock status fields: {bad}") from e


class _PongListener(asyncio.DatagramProtocol):
    """Resolves a future with the first datagram received."""

    def __init__(self, future: asyncio.Future[bytes]) -> None:
        self._future = future

    def datagram_received(self, data: bytes, addr: Any) -> None:
        if not self._future.done():
            self._future.set_result(data)

    def error_received(self, exc: Exception) -> None:
        if not self._future.done():
            self._future.set_exception(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if exc is not None and not self._future.done():
            self._future.set_exception(exc)


class BedrockStatusProtocol(StatusProtocol):
    """Single unconnected ping/pong datagram exchange."""

    def __init__(self) -> None:
        self.client_guid = random.getrandbits(64)

    async def query(self, address: ServerAddress) -> ServerStatus:
        target = str(address)
        loop = asyncio.get_running_loop()
        future: asyncio.Future[bytes] = loop.create_future()

        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _PongListener(future),
                remote_addr=(address.connect_host, address.port),
            )
        except OSError as e:
            raise ConnectionFailure(f"failed to open datagram endpoint: {e}", target) from e

        try:
            transport.sendto(build_unconnected_ping(int(time.monotonic() * 1000), self.client_guid))
            try:
                data = await future
            except OSError as e:
                raise ConnectionFailure(f"datagram exchange failed: {e}", target) from e
        finally:
            transport.close()

        status = parse_bedrock_reply(parse_unconnected_pong(data))
        log.debug(
            "bedrock_pong_received",
            address=target,
            online=status.online_players,
            max=status.max_players,
        )
        return ServerStatus(address=address, data=status)
