# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Status client dispatching on edition, with timeout and concurrency limits."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, Field

from mcstatuslog.constants import DEFAULT_MAX_PARALLEL, DEFAULT_TIMEOUT_S, JAVA_PROTOCOL_VERSION
from mcstatuslog.errors import DecodeFailure, PollTimeout, ProtocolError
from mcstatuslog.models import Edition
from mcstatuslog.protocol.bedrock import BedrockStatusProtocol
from mcstatuslog.protocol.java import JavaStatusProtocol

if TYPE_CHECKING:
    from mcstatuslog.address import ServerAddress
    from mcstatuslog.models import ServerStatus
    from mcstatuslog.protocol.base import StatusProtocol

log = structlog.get_logger()


class ClientConfig(BaseModel):
    """Immutable client options, built once per run."""

    timeout: float = Field(default=DEFAULT_TIMEOUT_S, gt=0)
    max_parallel: int = Field(default=DEFAULT_MAX_PARALLEL, ge=1)
    protocol_version: int = JAVA_PROTOCOL_VERSION

    model_config = ConfigDict(frozen=True)


class McClient:
    """Performs one status round trip per ``poll`` call.

    No retries happen here; a failed poll raises a ``ProtocolError``.
    """

    def __init__(self, config: ClientConfig | None = None) -> None:
        self.config = config or ClientConfig()
        self._semaphore = asyncio.Semaphore(self.config.max_parallel)
        self._java = JavaStatusProtocol(self.config.protocol_version)
        self._bedrock = BedrockStatusProtocol()

    @property
    def max_parallel(self) -> int:
        """Upper bound on simultaneous in-flight polls."""
        return self.config.max_parallel

    def protocol_for(self, edition: Edition) -> StatusProtocol:
        match edition:
            case Edition.JAVA:
                return self._java
            case Edition.BEDROCK:
                return self._bedrock
            case _:
                raise ValueError(f"Unknown edition: {edition}")

    async def poll(self, address: ServerAddress, edition: Edition) -> ServerStatus:
        """Query ``address`` once using the protocol for ``edition``.

        Args:
            address: Validated server address
            edition: Protocol the server speaks

        Returns:
            Status whose payload matches ``edition``

        Raises:
            ConnectionFailure: If the server cannot be reached
            PollTimeout: If the round trip exceeds ``config.timeout``
            DecodeFailure: If the reply is malformed
        """
        protocol = self.protocol_for(edition)
        target = str(address)

        async with self._semaphore:
            started = time.monotonic()
            try:
                status = await asyncio.wait_for(protocol.query(address), timeout=self.config.timeout)
            except TimeoutError as e:
                log.warning("poll_timeout", address=target, timeout=self.config.timeout)
                raise PollTimeout(self.config.timeout, target) from e
            except ProtocolError as e:
                if e.address is None:
                    e.address = target
                log.warning("poll_failed", address=target, error_type=type(e).__name__, error=e.message)
                raise

        if status.edition != edition:
            raise DecodeFailure(f"expected {edition} payload, got {status.edition}", target)

        log.debug(
            "poll_succeeded",
            address=target,
            edition=str(edition),
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return status
