# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Server address parsing and validation."""

from __future__ import annotations

import ipaddress
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mcstatuslog.constants import DEFAULT_JAVA_PORT
from mcstatuslog.errors import InvalidAddress

_HOSTNAME_LABEL_RE = re.compile(r"(?!-)[A-Za-z0-9-]{1,63}(?<!-)")
_MAX_HOSTNAME_LENGTH = 253


def is_ip_literal(host: str) -> bool:
    """Return True for IPv4/IPv6 literals, including bracketed IPv6."""
    candidate = host
    if candidate.startswith("[") and candidate.endswith("]"):
        candidate = candidate[1:-1]
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        return False
    return True


def is_valid_hostname(host: str) -> bool:
    """Check RFC 1123 hostname syntax (a single trailing dot is allowed)."""
    if not host or len(host) > _MAX_HOSTNAME_LENGTH:
        return False
    name = host[:-1] if host.endswith(".") else host
    if not name:
        return False
    return all(_HOSTNAME_LABEL_RE.fullmatch(label) for label in name.split("."))


def is_valid_host(host: str) -> bool:
    return is_ip_literal(host) or is_valid_hostname(host)


class ServerAddress(BaseModel):
    """Validated host and port of a server."""

    host: str
    port: int = Field(ge=0, le=65535)

    model_config = ConfigDict(frozen=True)

    @field_validator("host")
    @classmethod
    def _check_host(cls, value: str) -> str:
        if not is_valid_host(value):
            raise ValueError(f"invalid IP address or hostname: {value!r}")
        return value

    @classmethod
    def parse(cls, host: str, port: int) -> ServerAddress:
        """Validate ``host`` and build an address.

        Raises:
            InvalidAddress: If host is neither an IP literal nor a hostname,
                or port is outside 0..65535
        """
        if not is_valid_host(host):
            raise InvalidAddress(host)
        if not 0 <= port <= 65535:
            raise InvalidAddress(f"{host}:{port}")
        return cls(host=host, port=port)

    @classmethod
    def from_string(cls, value: str, default_port: int = DEFAULT_JAVA_PORT) -> ServerAddress:
        """Parse ``host``, ``host:port``, ``v4:port`` or ``[v6]:port``.

        Surrounding whitespace is not trimmed; it makes the host invalid.
        """
        if value.startswith("["):
            end = value.find("]")
            if end == -1:
                raise InvalidAddress(value)
            host, rest = value[: end + 1], value[end + 1 :]
            if not rest:
                return cls.parse(host, default_port)
            if not rest.startswith(":") or not rest[1:].isdigit():
                raise InvalidAddress(value)
            return cls.parse(host, int(rest[1:]))
        if value.count(":") == 1:
            host, _, port = value.partition(":")
            if not port.isdigit() or int(port) > 65535:
                raise InvalidAddress(value)
            return cls.parse(host, int(port))
        # Bare host, or an unbracketed IPv6 literal
        return cls.parse(value, default_port)

    @property
    def connect_host(self) -> str:
        """Host as passed to the socket layer (brackets removed)."""
        if self.host.startswith("[") and self.host.endswith("]"):
            return self.host[1:-1]
        return self.host

    @property
    def is_ipv6(self) -> bool:
        try:
            return ipaddress.ip_address(self.connect_host).version == 6
        except ValueError:
            return False

    def __str__(self) -> str:
        if self.is_ipv6:
            return f"[{self.connect_host}]:{self.port}"
        return f"{self.host}:{self.port}"
