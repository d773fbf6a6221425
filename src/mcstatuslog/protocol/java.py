# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Java edition Server List Ping over TCP."""

from __future__ import annotations

import asyncio
import contextlib
import json
import time
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from mcstatuslog.constants import (
    JAVA_NEXT_STATE_STATUS,
    JAVA_PROTOCOL_VERSION,
    PACKET_HANDSHAKE,
    PACKET_PING,
    PACKET_PONG,
    PACKET_STATUS_REQUEST,
    PACKET_STATUS_RESPONSE,
)
from mcstatuslog.errors import ConnectionFailure, DecodeFailure
from mcstatuslog.models import JavaStatus, ServerStatus
from mcstatuslog.protocol.base import StatusProtocol
from mcstatuslog.protocol.codec import (
    build_packet,
    read_long,
    read_packet,
    read_string,
    write_long,
    write_string,
    write_unsigned_short,
    write_varint,
)

if TYPE_CHECKING:
    from asyncio import StreamReader, StreamWriter

    from mcstatuslog.address import ServerAddress

log = structlog.get_logger()


def flatten_description(component: Any) -> str:
    """Flatten a chat component (string, object or list) to its text.

    Legacy ``§`` formatting codes inside text are kept as-is.
    """
    if component is None:
        return ""
    if isinstance(component, str):
        return component
    if isinstance(component, list):
        return "".join(flatten_description(part) for part in component)
    if isinstance(component, dict):
        text = component.get("text")
        if text is None:
            text = component.get("translate", "")
        return str(text) + flatten_description(component.get("extra"))
    return str(component)


def _plugins(raw: Any) -> list[dict[str, Any]] | None:
    if not isinstance(raw, list):
        return None
    plugins: list[dict[str, Any]] = []
    for item in raw:
        if isinstance(item, str):
            plugins.append({"name": item})
        elif isinstance(item, dict) and "name" in item:
            plugins.append({"name": str(item["name"]), "version": _opt_str(item.get("version"))})
    return plugins


def _mods(payload: dict[str, Any]) -> list[dict[str, Any]] | None:
    """Collect mods from the plain, FML1 (``modinfo``) or FML2 (``forgeData``) layouts."""
    raw: Any = payload.get("mods")
    if raw is None and isinstance(payload.get("modinfo"), dict):
        raw = payload["modinfo"].get("modList")
    if raw is None and isinstance(payload.get("forgeData"), dict):
        raw = payload["forgeData"].get("mods")
    if not isinstance(raw, list):
        return None
    mods: list[dict[str, Any]] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        modid = item.get("modid", item.get("modId"))
        if modid is None:
            continue
        version = item.get("version", item.get("modmarker"))
        mods.append({"modid": str(modid), "version": _opt_str(version)})
    return mods


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def decode_java_status(payload: str | bytes | dict[str, Any]) -> JavaStatus:
    """Decode a status JSON document into a JavaStatus.

    Absent optional fields stay ``None``. ``version`` and ``players`` are
    required.

    Raises:
        DecodeFailure: If the JSON is invalid or does not match the status shape
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise DecodeFailure("status response is not valid JSON") from e
    if not isinstance(payload, dict):
        raise DecodeFailure("status response JSON is not an object")

    fields: dict[str, Any] = {
        "description": flatten_description(payload.get("description")),
        "version": payload.get("version"),
        "players": payload.get("players"),
        "plugins": _plugins(payload.get("plugins")),
        "mods": _mods(payload),
    }
    for key in ("map", "gamemode", "software", "favicon"):
        fields[key] = _opt_str(payload.get(key))

    try:
        return JavaStatus.model_validate(fields)
    except ValidationError as e:
        raise DecodeFailure(f"unexpected status shape ({e.error_count()} errors)") from e


def build_handshake(host: str, port: int, protocol_version: int = JAVA_PROTOCOL_VERSION) -> bytes:
    payload = (
        write_varint(protocol_version)
        + write_string(host)
        + write_unsigned_short(port)
        + write_varint(JAVA_NEXT_STATE_STATUS)
    )
    return build_packet(PACKET_HANDSHAKE, payload)


class JavaStatusProtocol(StatusProtocol):
    """Handshake, status request and ping/pong over one TCP connection."""

    def __init__(self, protocol_version: int = JAVA_PROTOCOL_VERSION) -> None:
        self.protocol_version = protocol_version

    async def query(self, address: ServerAddress) -> ServerStatus:
        target = str(address)
        try:
            reader, writer = await asyncio.open_connection(address.connect_host, address.port)
        except OSError as e:
            raise ConnectionFailure(f"failed to connect: {e}", target) from e

        try:
            status = await self._exchange(reader, writer, address)
        except OSError as e:
            raise ConnectionFailure(f"connection lost: {e}", target) from e
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

        return ServerStatus(address=address, data=status)

    async def _exchange(self, reader: StreamReader, writer: StreamWriter, address: ServerAddress) -> JavaStatus:
        writer.write(build_handshake(address.connect_host, address.port, self.protocol_version))
        writer.write(build_packet(PACKET_STATUS_REQUEST))
        await writer.drain()

        packet_id, payload = await read_packet(reader)
        if packet_id != PACKET_STATUS_RESPONSE:
            raise DecodeFailure(f"expected status response 0x00, got {packet_id:#04x}")
        text, _ = read_string(payload)
        status = decode_java_status(text)
        log.debug(
            "java_status_received",
            address=str(address),
            online=status.players.online,
            max=status.players.max,
        )

        token = int(time.time() * 1000)
        writer.write(build_packet(PACKET_PING, write_long(token)))
        await writer.drain()

        packet_id, payload = await read_packet(reader)
        if packet_id != PACKET_PONG:
            raise DecodeFailure(f"expected pong 0x01, got {packet_id:#04x}")
        echoed, _ = read_long(payload)
        if echoed != token:
            raise DecodeFailure(f"pong payload mismatch: sent {token}, got {echoed}")

        return status
