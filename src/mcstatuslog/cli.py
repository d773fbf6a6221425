# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""mcstatuslog command line interface."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from mcstatuslog import __version__
from mcstatuslog.address import ServerAddress
from mcstatuslog.constants import DEFAULT_INTERVAL_S, DEFAULT_TIMEOUT_S
from mcstatuslog.errors import InvalidAddress, LogWriteError, ProtocolError
from mcstatuslog.logging import configure_logging, get_logger
from mcstatuslog.models import Edition
from mcstatuslog.output import default_log_path
from mcstatuslog.poller import OutputMode, PollConfig, Poller
from mcstatuslog.settings import Settings

logger = get_logger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-i", "--ip", "host", required=True, help="IP or hostname of the server.")
@click.option("-p", "--port", type=click.IntRange(0, 65535), required=True, help="Port of the server.")
@click.option(
    "-e",
    "--edition",
    type=click.Choice([e.value for e in Edition]),
    default=Edition.JAVA.value,
    show_default=True,
    help="Minecraft game edition.",
)
@click.option(
    "-I",
    "--interval",
    type=click.IntRange(min=1),
    default=DEFAULT_INTERVAL_S,
    show_default=True,
    help="Seconds between pings.",
)
@click.option(
    "-t",
    "--timeout",
    type=click.IntRange(min=1),
    default=DEFAULT_TIMEOUT_S,
    show_default=True,
    help="Seconds to wait for one ping before giving up.",
)
@click.option(
    "--output-type",
    type=click.Choice([m.value for m in OutputMode]),
    default=OutputMode.ALL.value,
    show_default=True,
    help="What to write to the log file.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Log file location (default: <address>-<timestamp>.log).",
)
@click.option("--no-output", is_flag=True, help="Do not save a log file.")
@click.option("-n", "--count", type=click.IntRange(min=1), default=None, help="Stop after this many pings.")
@click.version_option(__version__, prog_name="mcstatuslog")
def cli(
    host: str,
    port: int,
    edition: str,
    interval: int,
    timeout: int,
    output_type: str,
    output: Path | None,
    no_output: bool,
    count: int | None,
) -> None:
    """A simple Minecraft server status logger."""
    settings = Settings()
    configure_logging(settings)

    try:
        address = ServerAddress.parse(host, port)
    except InvalidAddress as e:
        raise click.ClickException("Invalid IP address or hostname.") from e

    log_path = None if no_output else (output or default_log_path(str(address)))
    config = PollConfig(
        address=address,
        edition=Edition(edition),
        interval=interval,
        timeout=timeout,
        output_mode=OutputMode(output_type),
        log_path=log_path,
        max_parallel=settings.max_parallel,
        protocol_version=settings.protocol_version,
    )
    poller = Poller(config)

    try:
        asyncio.run(poller.run(max_cycles=count))
    except ProtocolError as e:
        logger.error("poller_stopped", error_type=type(e).__name__, error=str(e))
        raise click.ClickException(str(e)) from e
    except LogWriteError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"System error: {e}") from e
    except KeyboardInterrupt:
        click.echo("Interrupted.", err=True)
        raise SystemExit(130) from None


def main() -> None:
    cli()
