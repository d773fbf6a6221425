# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Poll loop: query, render, log on change, sleep, repeat."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import assert_never

import click
import structlog
from pydantic import BaseModel, ConfigDict, Field

from mcstatuslog.address import ServerAddress
from mcstatuslog.client import ClientConfig, McClient
from mcstatuslog.constants import (
    DEFAULT_INTERVAL_S,
    DEFAULT_MAX_PARALLEL,
    DEFAULT_TIMEOUT_S,
    JAVA_PROTOCOL_VERSION,
)
from mcstatuslog.logging import get_logger
from mcstatuslog.models import BedrockStatus, Edition, JavaStatus, PlayerSample, ServerStatus
from mcstatuslog.output import StatusLog
from mcstatuslog.render import (
    DEFAULT_WIDTH,
    build_condensed_lines,
    build_lines,
    player_change_record,
    render_box,
    strip_ansi,
)

logger = get_logger(__name__)


class OutputMode(StrEnum):
    """What gets rendered and appended to the status log."""

    ALL = "all"
    PLAYERS = "players"
    CONDENSED = "condensed"


class PollConfig(BaseModel):
    """Immutable run configuration built once from validated input."""

    address: ServerAddress
    edition: Edition = Edition.JAVA
    interval: float = Field(default=DEFAULT_INTERVAL_S, gt=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT_S, gt=0)
    output_mode: OutputMode = OutputMode.ALL
    log_path: Path | None = None
    max_parallel: int = Field(default=DEFAULT_MAX_PARALLEL, ge=1)
    protocol_version: int = JAVA_PROTOCOL_VERSION

    model_config = ConfigDict(frozen=True)

    @property
    def logging_enabled(self) -> bool:
        return self.log_path is not None

    def client_config(self) -> ClientConfig:
        return ClientConfig(
            timeout=self.timeout,
            max_parallel=self.max_parallel,
            protocol_version=self.protocol_version,
        )


@dataclass
class PollState:
    """Cross-cycle memory of the loop: last logged counts and the cycle number.

    Counts are ``None`` until the first observed cycle sets the baseline.
    """

    last_online: int | None = None
    last_max: int | None = None
    iteration: int = 1

    @property
    def has_baseline(self) -> bool:
        return self.last_online is not None and self.last_max is not None


@dataclass
class CycleResult:
    iteration: int
    timestamp: datetime
    status: ServerStatus
    lines: list[str]
    rendered: str
    logged: bool


def player_counts(status: ServerStatus) -> tuple[int, int]:
    """(online, max) for either edition."""
    match status.data:
        case JavaStatus() as data:
            return data.players.online, data.players.max
        case BedrockStatus() as data:
            return data.online_players, data.max_players
        case unreachable:
            assert_never(unreachable)


def player_sample(status: ServerStatus) -> list[PlayerSample]:
    match status.data:
        case JavaStatus() as data:
            return list(data.players.sample or [])
        case BedrockStatus():
            return []
        case unreachable:
            assert_never(unreachable)


def players_changed(state: PollState, online: int, max_players: int) -> bool:
    """True when a baseline exists and (online, max) differs from it."""
    if not state.has_baseline:
        return False
    return (online, max_players) != (state.last_online, state.last_max)


def _echo(text: str) -> None:
    click.echo(text, nl=False)


def _now() -> datetime:
    return datetime.now().astimezone()


class Poller:
    """Drives one client against one address until a poll fails.

    Cycle N+1 starts only after cycle N has rendered, logged and slept. The
    sleep is the full interval; network time is not subtracted.
    """

    def __init__(
        self,
        config: PollConfig,
        client: McClient | None = None,
        *,
        status_log: StatusLog | None = None,
        emit: Callable[[str], None] = _echo,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        clock: Callable[[], datetime] = _now,
        width: int = DEFAULT_WIDTH,
    ) -> None:
        self.config = config
        self.client = client or McClient(config.client_config())
        if status_log is None and config.log_path is not None:
            status_log = StatusLog(config.log_path)
        self.status_log = status_log
        self.state = PollState()
        self._emit = emit
        self._sleep = sleep
        self._clock = clock
        self._width = width

    async def run(self, max_cycles: int | None = None) -> int:
        """Poll until a ``ProtocolError`` propagates or ``max_cycles`` complete.

        Returns:
            Number of completed cycles
        """
        completed = 0
        logger.info(
            "poller_started",
            address=str(self.config.address),
            edition=str(self.config.edition),
            interval=self.config.interval,
            output_mode=str(self.config.output_mode),
            log_path=str(self.config.log_path) if self.config.log_path else None,
        )
        while max_cycles is None or completed < max_cycles:
            await self.run_cycle()
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            await self._sleep(self.config.interval)
        return completed

    async def run_cycle(self) -> CycleResult:
        """Poll once, render, log if required, advance the iteration counter."""
        iteration = self.state.iteration
        timestamp = self._clock()
        with structlog.contextvars.bound_contextvars(iteration=iteration):
            status = await self.client.poll(self.config.address, self.config.edition)

        if self.config.output_mode is OutputMode.CONDENSED:
            lines = build_condensed_lines(status, timestamp)
        else:
            lines = build_lines(status, timestamp)
        rendered = render_box(lines, iteration, self._width)
        self._emit(rendered)

        logged = self._log(status, timestamp, iteration, rendered)
        self.state.iteration += 1
        return CycleResult(
            iteration=iteration,
            timestamp=timestamp,
            status=status,
            lines=lines,
            rendered=rendered,
            logged=logged,
        )

    def _log(self, status: ServerStatus, timestamp: datetime, iteration: int, rendered: str) -> bool:
        if self.status_log is None:
            return False

        match self.config.output_mode:
            case OutputMode.ALL | OutputMode.CONDENSED:
                self.status_log.append(strip_ansi(rendered))
                return True
            case OutputMode.PLAYERS:
                self.status_log.touch()
                online, max_players = player_counts(status)
                if not self.state.has_baseline:
                    self.state.last_online = online
                    self.state.last_max = max_players
                    return False
                if not players_changed(self.state, online, max_players):
                    return False
                record = player_change_record(
                    timestamp,
                    str(self.config.address),
                    online,
                    max_players,
                    iteration,
                    player_sample(status),
                )
                self.status_log.append(record)
                logger.info(
                    "players_changed",
                    iteration=iteration,
                    previous=f"{self.state.last_online}/{self.state.last_max}",
                    current=f"{online}/{max_players}",
                )
                self.state.last_online = online
                self.state.last_max = max_players
                return True
            case unreachable:
                assert_never(unreachable)
