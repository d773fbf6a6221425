"""Tests for McClient dispatch, timeouts and concurrency limits."""

from __future__ import annotations

import asyncio
import time

import pytest
from pydantic import ValidationError

from mcstatuslog.address import ServerAddress
from mcstatuslog.client import ClientConfig, McClient
from mcstatuslog.errors import ConnectionFailure, DecodeFailure, PollTimeout
from mcstatuslog.models import BedrockStatus, Edition, JavaStatus, ServerStatus
from mcstatuslog.protocol.base import StatusProtocol
from mcstatuslog.protocol.bedrock import BedrockStatusProtocol
from mcstatuslog.protocol.java import JavaStatusProtocol

from .mock_server import (
    MockBedrockServer,
    MockJavaServer,
    bedrock_pong,
    bedrock_reply,
    java_status_payload,
    unused_tcp_port,
)

SLACK_S = 0.5


def test_client_config_is_immutable_and_validated() -> None:
    config = ClientConfig(timeout=3, max_parallel=2)
    with pytest.raises(ValidationError):
        config.timeout = 5  # type: ignore[misc]
    with pytest.raises(ValidationError):
        ClientConfig(timeout=0)
    with pytest.raises(ValidationError):
        ClientConfig(max_parallel=0)


def test_client_exposes_max_parallel() -> None:
    assert McClient(ClientConfig(max_parallel=4)).max_parallel == 4
    assert McClient().max_parallel == 10


def test_protocol_dispatch() -> None:
    client = McClient()
    assert isinstance(client.protocol_for(Edition.JAVA), JavaStatusProtocol)
    assert isinstance(client.protocol_for(Edition.BEDROCK), BedrockStatusProtocol)


@pytest.mark.asyncio
async def test_poll_java() -> None:
    async with MockJavaServer([java_status_payload(5, 20)]) as server:
        status = await McClient(ClientConfig(timeout=2)).poll(
            ServerAddress.parse("127.0.0.1", server.port), Edition.JAVA
        )
    assert status.edition is Edition.JAVA
    assert isinstance(status.data, JavaStatus)
    assert (status.data.players.online, status.data.players.max) == (5, 20)


@pytest.mark.asyncio
async def test_poll_bedrock() -> None:
    async with MockBedrockServer(bedrock_pong(bedrock_reply(online="2"))) as server:
        status = await McClient(ClientConfig(timeout=2)).poll(
            ServerAddress.parse("127.0.0.1", server.port), Edition.BEDROCK
        )
    assert status.edition is Edition.BEDROCK
    assert isinstance(status.data, BedrockStatus)
    assert status.data.online_players == 2


@pytest.mark.asyncio
async def test_poll_connection_refused() -> None:
    address = ServerAddress.parse("127.0.0.1", unused_tcp_port())
    with pytest.raises(ConnectionFailure):
        await McClient(ClientConfig(timeout=2)).poll(address, Edition.JAVA)


@pytest.mark.asyncio
@pytest.mark.parametrize("timeout", [0.3, 0.6])
async def test_poll_timeout_silent_java_server(timeout: float) -> None:
    async with MockJavaServer(silent=True) as server:
        client = McClient(ClientConfig(timeout=timeout))
        started = time.monotonic()
        with pytest.raises(PollTimeout) as exc_info:
            await client.poll(ServerAddress.parse("127.0.0.1", server.port), Edition.JAVA)
        elapsed = time.monotonic() - started

    assert timeout <= elapsed < timeout + SLACK_S
    assert exc_info.value.timeout == timeout
    assert exc_info.value.address == f"127.0.0.1:{server.port}"


@pytest.mark.asyncio
async def test_poll_timeout_silent_bedrock_server() -> None:
    timeout = 0.4
    async with MockBedrockServer(silent=True) as server:
        started = time.monotonic()
        with pytest.raises(PollTimeout):
            await McClient(ClientConfig(timeout=timeout)).poll(
                ServerAddress.parse("127.0.0.1", server.port), Edition.BEDROCK
            )
        elapsed = time.monotonic() - started

    assert timeout <= elapsed < timeout + SLACK_S
    assert len(server.pings) == 1


@pytest.mark.asyncio
async def test_decode_failure_carries_address() -> None:
    async with MockBedrockServer(bedrock_pong("MCPE;short")) as server:
        with pytest.raises(DecodeFailure) as exc_info:
            await McClient(ClientConfig(timeout=2)).poll(
                ServerAddress.parse("127.0.0.1", server.port), Edition.BEDROCK
            )
    assert exc_info.value.address == f"127.0.0.1:{server.port}"
    assert str(exc_info.value).startswith(f"127.0.0.1:{server.port}: ")


class _SlowProtocol(StatusProtocol):
    def __init__(self, status: ServerStatus) -> None:
        self.status = status
        self.in_flight = 0
        self.peak = 0

    async def query(self, address: ServerAddress) -> ServerStatus:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        await asyncio.sleep(0.05)
        self.in_flight -= 1
        return self.status


@pytest.mark.asyncio
async def test_max_parallel_bounds_in_flight_polls(java_status: ServerStatus) -> None:
    client = McClient(ClientConfig(timeout=5, max_parallel=2))
    slow = _SlowProtocol(java_status)
    client._java = slow  # noqa: SLF001

    await asyncio.gather(*(client.poll(java_status.address, Edition.JAVA) for _ in range(6)))

    assert slow.peak == 2


@pytest.mark.asyncio
async def test_payload_edition_mismatch_is_decode_failure(java_status: ServerStatus) -> None:
    client = McClient(ClientConfig(timeout=1))
    client._bedrock = _SlowProtocol(java_status)  # noqa: SLF001

    with pytest.raises(DecodeFailure, match="expected bedrock payload"):
        await client.poll(java_status.address, Edition.BEDROCK)
