# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import structlog

from mcstatuslog.address import ServerAddress
from mcstatuslog.models import (
    BedrockStatus,
    JavaPlayers,
    JavaStatus,
    JavaVersion,
    PlayerSample,
    ServerStatus,
)


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Drop logging config that may point at a stream captured by a previous test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def server_host() -> str:
    """Default server host for testing."""
    return "127.0.0.1"


@pytest.fixture
def server_address(server_host: str) -> ServerAddress:
    return ServerAddress.parse(server_host, 25565)


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone(timedelta(hours=1)))


@pytest.fixture
def java_status(server_address: ServerAddress) -> ServerStatus:
    data = JavaStatus(
        description="§aWelcome\n§7to the server",
        version=JavaVersion(name="Paper 1.21.1", protocol=767),
        players=JavaPlayers(
            online=2,
            max=20,
            sample=[
                PlayerSample(name="Notch", id="069a79f4-44e9-4726-a5be-fca90e38aaf5"),
                PlayerSample(name="jeb_", id="853c80ef-3c37-49fd-aa49-938b674adae6"),
            ],
        ),
    )
    return ServerStatus(address=server_address, data=data)


@pytest.fixture
def bedrock_status(server_address: ServerAddress) -> ServerStatus:
    data = BedrockStatus(
        edition_label="MCPE",
        motd="Dedicated Server",
        motd2="Bedrock level",
        protocol_version=712,
        version="1.21.2",
        online_players="4",
        max_players="10",
        server_uid="11743405467184235624",
        map="Bedrock level",
        game_mode="Survival",
        game_mode_numeric=1,
        port_ipv4=19132,
        port_ipv6=19133,
    )
    return ServerStatus(address=server_address, data=data)
