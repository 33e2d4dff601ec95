# tests/test_cli.py
"""
Tests for the utts notifications command-line interface (CLI).

Scope
-----
1.  **Command Registration**: `--help` lists the commands.
2.  **Store Integration**: commands read and write the JSONL log under the
    temp config directory set up by the `config_dir` fixture.
3.  **Error Handling**: unknown ids exit with code 1 and a readable message.

Subprocesses (replay, activation, banners) are patched out.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from utts.cli import app


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Fresh CliRunner per test to keep Click state isolated."""
    return CliRunner()


def _records(config_dir: Path) -> list[dict[str, object]]:
    path = config_dir / "notifications.jsonl"
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    for command in ("log", "list", "dismiss", "replay", "activate"):
        assert command in result.output


def test_log_then_list(runner: CliRunner, config_dir: Path) -> None:
    result = runner.invoke(app, ["log", "build ok", "--caller", "ci: deploy"])
    assert result.exit_code == 0, result.output

    (record,) = _records(config_dir)
    assert record["text"] == "build ok"
    assert record["caller"] == "ci: deploy"
    assert record["id"] in result.output

    listed = runner.invoke(app, ["list"])
    assert listed.exit_code == 0, listed.output
    assert "build ok" in listed.output
    assert "ci" in listed.output


def test_log_with_url_action_and_banner(runner: CliRunner, config_dir: Path) -> None:
    with patch("utts.cli.TerminalNotifier.send_notification", return_value=True) as banner:
        result = runner.invoke(app, ["log", "PR ready", "--url", "https://x/pr/1", "--banner"])

    assert result.exit_code == 0, result.output
    banner.assert_called_once()
    (record,) = _records(config_dir)
    assert record["metadata"] == {"action": {"type": "url", "url": "https://x/pr/1"}}


def test_log_rejects_two_actions(runner: CliRunner, config_dir: Path) -> None:
    result = runner.invoke(app, ["log", "x", "--url", "https://a", "--shell", "ls"])
    assert result.exit_code == 2
    assert not (config_dir / "notifications.jsonl").exists()


def test_empty_list_message(runner: CliRunner, config_dir: Path) -> None:
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "caught up" in result.output


def test_dismiss_flow(runner: CliRunner, config_dir: Path) -> None:
    runner.invoke(app, ["log", "first"])
    (record,) = _records(config_dir)

    result = runner.invoke(app, ["dismiss", str(record["id"])])
    assert result.exit_code == 0, result.output
    assert _records(config_dir)[0]["dismissed_at"] is not None

    assert "caught up" in runner.invoke(app, ["list"]).output
    assert "first" in runner.invoke(app, ["list", "--all"]).output


def test_dismiss_all(runner: CliRunner, config_dir: Path) -> None:
    runner.invoke(app, ["log", "a"])
    runner.invoke(app, ["log", "b"])

    result = runner.invoke(app, ["dismiss-all"])

    assert result.exit_code == 0
    assert all(r["dismissed_at"] for r in _records(config_dir))


@pytest.mark.parametrize("command", ["show", "dismiss", "replay", "activate"])  # type: ignore[misc]
def test_unknown_id_exits_1(runner: CliRunner, config_dir: Path, command: str) -> None:
    result = runner.invoke(app, [command, "ghost"])
    assert result.exit_code == 1, result.output
    assert "No notification with id ghost" in result.output


def test_show_prints_details(runner: CliRunner, config_dir: Path) -> None:
    runner.invoke(app, ["log", "hello", "--agent", "writer"])
    (record,) = _records(config_dir)

    result = runner.invoke(app, ["show", str(record["id"])])

    assert result.exit_code == 0, result.output
    assert "hello" in result.output
    assert "writer" in result.output


def test_replay_spawns_host_cli(runner: CliRunner, config_dir: Path) -> None:
    runner.invoke(app, ["log", "again", "--caller", "proj: x"])
    (record,) = _records(config_dir)

    with patch("utts.notifications.replay.subprocess.Popen") as mock_popen:
        result = runner.invoke(app, ["replay", str(record["id"])])

    assert result.exit_code == 0, result.output
    argv = mock_popen.call_args.args[0]
    assert argv[1:] == ["again", "--caller", "replay: proj: x"]


def test_activate_runs_shell_action(runner: CliRunner, config_dir: Path) -> None:
    runner.invoke(app, ["log", "tests", "--shell", "make test"])
    (record,) = _records(config_dir)

    with patch("utts.notifications.actions.subprocess.run") as mock_run:
        mock_run.return_value.returncode = 0
        result = runner.invoke(app, ["activate", str(record["id"])])

    assert result.exit_code == 0, result.output
    assert "Activated" in result.output
    mock_run.assert_called_once_with("make test", shell=True, check=False)
