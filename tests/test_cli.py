"""Tests for the mcstatuslog command line."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from mcstatuslog import __version__, cli as cli_module
from mcstatuslog.cli import cli

from .mock_server import MockJavaServer, java_status_payload, unused_tcp_port


@contextmanager
def java_server_in_thread(statuses: list[dict[str, Any] | str]) -> Iterator[MockJavaServer]:
    """Run a MockJavaServer on its own loop so the CLI can call asyncio.run()."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    server = MockJavaServer(statuses)
    asyncio.run_coroutine_threadsafe(server.__aenter__(), loop).result(timeout=5)
    try:
        yield server
    finally:
        asyncio.run_coroutine_threadsafe(server.__aexit__(None, None, None), loop).result(timeout=5)
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.parametrize(
    "host", ["not a host!", "bad_host.example", "", " 127.0.0.1", "example.com ", "\tplay.example.net\n"]
)
def test_invalid_host_exits_before_polling(runner: CliRunner, monkeypatch: pytest.MonkeyPatch, host: str) -> None:
    created: list[object] = []
    monkeypatch.setattr(cli_module, "Poller", lambda *args, **kwargs: created.append(args))

    result = runner.invoke(cli, ["-i", host, "-p", "25565", "--no-output"])

    assert result.exit_code == 1
    assert "Invalid IP address or hostname." in result.output
    assert created == []


def test_port_out_of_range_is_a_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["-i", "127.0.0.1", "-p", "70000"])
    assert result.exit_code == 2


def test_unknown_edition_is_a_usage_error(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["-i", "127.0.0.1", "-p", "25565", "-e", "pocket"])
    assert result.exit_code == 2


def test_options_reach_poll_config(runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: dict[str, Any] = {}

    class RecordingPoller:
        def __init__(self, config: Any) -> None:
            seen["config"] = config

        async def run(self, max_cycles: int | None = None) -> int:
            seen["max_cycles"] = max_cycles
            return 0

    monkeypatch.setattr(cli_module, "Poller", RecordingPoller)
    log_path = tmp_path / "out.log"

    result = runner.invoke(
        cli,
        [
            "-i", "example.net", "-p", "19132", "-e", "bedrock", "-I", "5", "-t", "3",
            "--output-type", "players", "-o", str(log_path), "-n", "4",
        ],
    )

    assert result.exit_code == 0, result.output
    config = seen["config"]
    assert str(config.address) == "example.net:19132"
    assert config.edition == "bedrock"
    assert config.interval == 5
    assert config.timeout == 3
    assert config.output_mode == "players"
    assert config.log_path == log_path
    assert seen["max_cycles"] == 4


def test_single_poll_prints_box_and_writes_log(runner: CliRunner) -> None:
    with java_server_in_thread([java_status_payload(2, 20)]) as server, runner.isolated_filesystem():
        result = runner.invoke(cli, ["-i", "127.0.0.1", "-p", str(server.port), "-n", "1"])

        assert result.exit_code == 0, result.output
        assert "Iteration 1" in result.output
        assert "2/20" in result.output

        logs = list(Path().glob(f"127.0.0.1:{server.port}-*.log"))
        assert len(logs) == 1
        content = logs[0].read_text(encoding="utf-8")
        assert "Iteration 1" in content
        assert "\x1b[" not in content


def test_no_output_writes_no_file(runner: CliRunner) -> None:
    with java_server_in_thread([java_status_payload(1, 10)]) as server, runner.isolated_filesystem():
        result = runner.invoke(cli, ["-i", "127.0.0.1", "-p", str(server.port), "-n", "1", "--no-output"])

        assert result.exit_code == 0, result.output
        assert list(Path().iterdir()) == []


def test_players_mode_logs_only_the_change(runner: CliRunner, tmp_path: Path) -> None:
    log_path = tmp_path / "players.log"
    statuses: list[dict[str, Any] | str] = [java_status_payload(5, 20), java_status_payload(6, 20)]

    with java_server_in_thread(statuses) as server:
        result = runner.invoke(
            cli,
            [
                "-i", "127.0.0.1", "-p", str(server.port), "-I", "1", "-n", "2",
                "--output-type", "players", "-o", str(log_path),
            ],
        )

    assert result.exit_code == 0, result.output
    content = log_path.read_text(encoding="utf-8")
    assert content.count("There are now") == 1
    assert "now 6/20 players" in content
    assert "(Iteration 2)" in content


def test_unreachable_server_exits_with_error(runner: CliRunner) -> None:
    port = unused_tcp_port()
    result = runner.invoke(cli, ["-i", "127.0.0.1", "-p", str(port), "-t", "2", "--no-output"])

    assert result.exit_code == 1
    assert f"127.0.0.1:{port}" in result.output


@pytest.mark.parametrize("output_type", ["all", "players", "condensed"])
def test_unwritable_log_path_exits_with_error(runner: CliRunner, tmp_path: Path, output_type: str) -> None:
    log_path = tmp_path / "missing" / "out.log"
    with java_server_in_thread([java_status_payload(1, 10)]) as server:
        result = runner.invoke(
            cli,
            [
                "-i", "127.0.0.1", "-p", str(server.port), "-n", "3", "-I", "1",
                "--output-type", output_type, "-o", str(log_path),
            ],
        )

    assert result.exit_code == 1
    assert "Cannot write log file" in result.output
    assert str(log_path) in result.output
    assert server.connections == 1


def test_other_os_errors_are_not_blamed_on_the_log(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    class FailingPoller:
        def __init__(self, config: Any) -> None:
            pass

        async def run(self, max_cycles: int | None = None) -> int:
            raise OSError("too many open files")

    monkeypatch.setattr(cli_module, "Poller", FailingPoller)

    result = runner.invoke(cli, ["-i", "127.0.0.1", "-p", "25565", "--no-output"])

    assert result.exit_code == 1
    assert "too many open files" in result.output
    assert "Cannot write log file" not in result.output
