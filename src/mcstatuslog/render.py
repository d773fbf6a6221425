# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Text rendering of poll results.

Line builders return rich markup strings (one entry per output line). The
boxed panel is rendered to an ANSI string so the same text can be printed
and, with colours stripped, appended to the status log.
"""

from __future__ import annotations

import io
import re
from collections.abc import Sequence
from datetime import datetime
from typing import assert_never

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from mcstatuslog.models import BedrockStatus, JavaStatus, PlayerSample, ServerStatus

_ANSI_ESCAPE_RE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*[@-~]|\][^\x07\x1b]*(?:\x07|\x1b\\)|[@-_])")
_FORMATTING_CODE_RE = re.compile(r"§[0-9a-fk-orA-FK-ORxX]")

DEFAULT_WIDTH = 100


def strip_ansi(text: str) -> str:
    """Remove ANSI escape/control sequences (colours, cursor moves, OSC links)."""
    if not text:
        return ""
    return _ANSI_ESCAPE_RE.sub("", text)


def strip_formatting_codes(text: str) -> str:
    """Remove legacy ``§`` colour/style codes from server text."""
    return _FORMATTING_CODE_RE.sub("", text)


def format_timestamp(timestamp: datetime) -> str:
    return timestamp.isoformat(sep=" ", timespec="seconds")


def _field(label: str, value: object) -> list[str]:
    text = strip_formatting_codes(str(value))
    return ["", f"[green]{label}:[/green] [blue]{escape(text)}[/blue]"]


def _block(label: str, text: str) -> list[str]:
    body = strip_formatting_codes(text)
    return ["", f"[green]{label}:[/green]", *(escape(line) for line in body.splitlines() or [""])]


def _item(name: str, detail: str) -> str:
    return f"  [green]-[/green] [blue]{escape(name)} ([magenta]{escape(detail)}[/magenta])[/blue]"


def _header(status: ServerStatus, timestamp: datetime) -> str:
    return (
        f"[bold][red]{escape(f'[{format_timestamp(timestamp)}]')}[/red] "
        f"[cyan]Pinged server with address [yellow]{escape(str(status.address))}[/yellow].[/cyan][/bold]"
    )


def _java_lines(data: JavaStatus) -> list[str]:
    lines = _block("Description", data.description)
    lines += _field("Version", data.version.name)
    lines += _field("Players", f"{data.players.online}/{data.players.max}")
    for player in data.players.sample or []:
        lines.append(_item(player.name, player.id))
    if data.map is not None:
        lines += _field("Map Name", data.map)
    if data.gamemode is not None:
        lines += _field("Game Mode", data.gamemode)
    if data.software is not None:
        lines += _field("Software", data.software)
    if data.plugins is not None:
        lines += _field("Plugins", len(data.plugins))
        lines += [_item(plugin.name, plugin.version or "unknown") for plugin in data.plugins]
    elif data.mods is not None:
        lines += _field("Mods", len(data.mods))
        lines += [_item(mod.modid, mod.version or "unknown") for mod in data.mods]
    return lines


def _bedrock_lines(data: BedrockStatus) -> list[str]:
    lines = _field("Edition", data.edition_label)
    lines += _block("MOTD", data.motd)
    lines += _block("Secondary MOTD", data.motd2)
    lines += _field("Protocol Version", data.protocol_version)
    lines += _field("Version", data.version)
    lines += _field("Players", f"{data.online_players}/{data.max_players}")
    lines += _field("Server UID", data.server_uid)
    lines += _field("Game Mode", f"{data.game_mode} ({data.game_mode_numeric})")
    lines += _field("IPv4 Port", data.port_ipv4)
    lines += _field("IPv6 Port", data.port_ipv6)
    if data.map is not None:
        lines += _field("Map Name", data.map)
    if data.software is not None:
        lines += _field("Software", data.software)
    return lines


def build_lines(status: ServerStatus, timestamp: datetime) -> list[str]:
    """Full summary of a status, header first."""
    lines = [_header(status, timestamp)]
    match status.data:
        case JavaStatus() as data:
            lines += _java_lines(data)
        case BedrockStatus() as data:
            lines += _bedrock_lines(data)
        case unreachable:
            assert_never(unreachable)
    return lines


def build_condensed_lines(status: ServerStatus, timestamp: datetime) -> list[str]:
    """Header, version and player count only."""
    lines = [_header(status, timestamp)]
    match status.data:
        case JavaStatus() as data:
            lines += _field("Version", data.version.name)
            lines += _field("Players", f"{data.players.online}/{data.players.max}")
        case BedrockStatus() as data:
            lines += _field("Version", data.version)
            lines += _field("Players", f"{data.online_players}/{data.max_players}")
        case unreachable:
            assert_never(unreachable)
    return lines


def player_change_record(
    timestamp: datetime,
    address: str,
    online: int,
    max_players: int,
    iteration: int,
    sample: Sequence[PlayerSample] = (),
) -> str:
    """Plain-text log entry for a player count change, ending with a blank line."""
    content = [
        f"[{format_timestamp(timestamp)}] There are now {online}/{max_players} players "
        f"on the server {address}. (Iteration {iteration})"
    ]
    content += [f"  - {player.name} ({player.id})" for player in sample]
    return "\n".join(content) + "\n\n"


def render_box(lines: Sequence[str], iteration: int, width: int = DEFAULT_WIDTH) -> str:
    """Render lines inside a rounded, titled panel as an ANSI string."""
    panel = Panel(
        Text.from_markup("\n".join(lines)),
        box=box.ROUNDED,
        border_style="white",
        padding=1,
        title=f"Iteration {iteration}",
        expand=False,
    )
    console = Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="standard",
        width=width,
        legacy_windows=False,
    )
    console.print(panel)
    return console.file.getvalue()
