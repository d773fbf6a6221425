# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""VarInt framing used by the Java edition protocol.

A packet on the wire is ``VarInt(length) + VarInt(packet_id) + payload``
where ``length`` counts the id and the payload. Strings are a VarInt byte
length followed by UTF-8.
"""

from __future__ import annotations

import asyncio
import struct
from typing import TYPE_CHECKING

from mcstatuslog.constants import JAVA_MAX_PACKET_SIZE, VARINT_MAX_BYTES
from mcstatuslog.errors import DecodeFailure

if TYPE_CHECKING:
    from asyncio import StreamReader


def write_varint(value: int) -> bytes:
    """Encode a signed 32-bit integer as a VarInt."""
    if not -(2**31) <= value < 2**31:
        raise ValueError(f"VarInt out of range: {value}")
    value &= 0xFFFFFFFF
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _to_signed(value: int) -> int:
    return value - (1 << 32) if value & 0x80000000 else value


def read_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a VarInt from ``data`` at ``offset``.

    Returns:
        (value, offset just past the VarInt)

    Raises:
        DecodeFailure: If the data ends early or the VarInt is too long
    """
    result = 0
    for i in range(VARINT_MAX_BYTES):
        if offset >= len(data):
            raise DecodeFailure("truncated VarInt")
        byte = data[offset]
        offset += 1
        result |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            return _to_signed(result & 0xFFFFFFFF), offset
    raise DecodeFailure("VarInt is too big")


def write_string(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return write_varint(len(encoded)) + encoded


def read_string(data: bytes, offset: int = 0) -> tuple[str, int]:
    """Decode a length-prefixed UTF-8 string.

    Raises:
        DecodeFailure: If the string is truncated or not valid UTF-8
    """
    length, offset = read_varint(data, offset)
    if length < 0:
        raise DecodeFailure(f"negative string length: {length}")
    end = offset + length
    if end > len(data):
        raise DecodeFailure(f"string truncated: need {length} bytes, have {len(data) - offset}")
    try:
        return data[offset:end].decode("utf-8"), end
    except UnicodeDecodeError as e:
        raise DecodeFailure("string is not valid UTF-8") from e


def write_unsigned_short(value: int) -> bytes:
    return struct.pack(">H", value)


def write_long(value: int) -> bytes:
    return struct.pack(">q", value)


def read_long(data: bytes, offset: int = 0) -> tuple[int, int]:
    if offset + 8 > len(data):
        raise DecodeFailure("truncated long")
    return struct.unpack_from(">q", data, offset)[0], offset + 8


def build_packet(packet_id: int, payload: bytes = b"") -> bytes:
    """Frame a packet id and payload with its length prefix."""
    body = write_varint(packet_id) + payload
    return write_varint(len(body)) + body


async def read_varint_stream(reader: StreamReader) -> int:
    """Read a VarInt one byte at a time from a stream."""
    result = 0
    for i in range(VARINT_MAX_BYTES):
        try:
            chunk = await reader.readexactly(1)
        except asyncio.IncompleteReadError as e:
            raise DecodeFailure("connection closed inside a VarInt") from e
        byte = chunk[0]
        result |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            return _to_signed(result & 0xFFFFFFFF)
    raise DecodeFailure("VarInt is too big")


async def read_packet(reader: StreamReader) -> tuple[int, bytes]:
    """Read one length-prefixed packet.

    Returns:
        (packet_id, payload)

    Raises:
        DecodeFailure: If the frame is empty, oversized or truncated
    """
    length = await read_varint_stream(reader)
    if length <= 0 or length > JAVA_MAX_PACKET_SIZE:
        raise DecodeFailure(f"invalid packet length: {length}")
    try:
        body = await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        raise DecodeFailure(f"packet truncated: expected {length} bytes, got {len(e.partial)}") from e
    packet_id, offset = read_varint(body)
    return packet_id, body[offset:]
