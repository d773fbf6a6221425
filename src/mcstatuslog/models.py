# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Edition-tagged status data returned by a single poll."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mcstatuslog.address import ServerAddress
from mcstatuslog.constants import DEFAULT_BEDROCK_PORT, DEFAULT_JAVA_PORT


class Edition(StrEnum):
    """Wire protocol spoken by the target server."""

    JAVA = "java"
    BEDROCK = "bedrock"

    @property
    def default_port(self) -> int:
        return DEFAULT_BEDROCK_PORT if self is Edition.BEDROCK else DEFAULT_JAVA_PORT


class PlayerSample(BaseModel):
    name: str
    id: str

    model_config = ConfigDict(frozen=True)


class JavaVersion(BaseModel):
    name: str
    protocol: int | None = None

    model_config = ConfigDict(frozen=True)


class JavaPlayers(BaseModel):
    online: int
    max: int
    sample: list[PlayerSample] | None = None

    model_config = ConfigDict(frozen=True)


class Plugin(BaseModel):
    name: str
    version: str | None = None

    model_config = ConfigDict(frozen=True)


class Mod(BaseModel):
    modid: str
    version: str | None = None

    model_config = ConfigDict(frozen=True)


class JavaStatus(BaseModel):
    """Status reported by a Java edition server.

    Optional fields are ``None`` when the server did not report them. A server
    reports plugins or mods, not both.
    """

    edition: Literal[Edition.JAVA] = Edition.JAVA
    description: str = ""
    version: JavaVersion
    players: JavaPlayers
    map: str | None = None
    gamemode: str | None = None
    software: str | None = None
    plugins: list[Plugin] | None = None
    mods: list[Mod] | None = None
    favicon: str | None = None

    model_config = ConfigDict(frozen=True)


def _lenient_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


class BedrockStatus(BaseModel):
    """Status reported by a Bedrock edition server.

    Player counts are sent as text; unparseable counts become 0.
    """

    edition: Literal[Edition.BEDROCK] = Edition.BEDROCK
    edition_label: str
    motd: str
    motd2: str
    protocol_version: int
    version: str
    online_players: int
    max_players: int
    server_uid: str
    map: str | None = None
    game_mode: str
    game_mode_numeric: int
    port_ipv4: int
    port_ipv6: int
    software: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("online_players", "max_players", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return _lenient_int(value)


StatusData = Annotated[JavaStatus | BedrockStatus, Field(discriminator="edition")]


class ServerStatus(BaseModel):
    """Result of one successful poll."""

    address: ServerAddress
    data: StatusData

    model_config = ConfigDict(frozen=True)

    @property
    def edition(self) -> Edition:
        return self.data.edition
