"""Tests for the terminal-notifier adapter (no real process is started)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from unittest.mock import patch

from utts.notifier import TerminalNotifier


def _capture(monkeypatch: Any, ok: bool = True) -> list[list[str]]:
    """Patch `_run` at class level (slots-safe) and record argv."""
    captured: list[list[str]] = []

    def fake_run(self: TerminalNotifier, cmd: Sequence[str]) -> bool:
        captured.append(list(cmd))
        return ok

    monkeypatch.setattr(TerminalNotifier, "_run", fake_run)
    return captured


def test_unavailable_notifier_returns_false(monkeypatch: Any) -> None:
    captured = _capture(monkeypatch)
    with patch("utts.notifier.shutil.which", return_value=None):
        notifier = TerminalNotifier()
        assert notifier.notify("hi") is False
        assert notifier.send_notification("hi") is False
    assert captured == []


def test_notify_builds_full_command(monkeypatch: Any) -> None:
    captured = _capture(monkeypatch)
    with patch("utts.notifier.shutil.which", return_value="/usr/local/bin/terminal-notifier"):
        ok = TerminalNotifier().notify(
            "done", title="ci", subtitle="deploy", sound=True, click_command="utts x"
        )

    assert ok is True
    assert captured == [
        [
            "terminal-notifier",
            "-message",
            "done",
            "-title",
            "ci",
            "-subtitle",
            "deploy",
            "-sound",
            "default",
            "-execute",
            "utts x",
            "-group",
            "utts",
            "-ignoreDnD",
        ]
    ]


def test_send_notification_defaults_and_mute(monkeypatch: Any) -> None:
    captured = _capture(monkeypatch, ok=False)
    with patch("utts.notifier.shutil.which", return_value="/bin/terminal-notifier"):
        assert TerminalNotifier().send_notification("hi", muted=True) is False

    (cmd,) = captured
    assert cmd[cmd.index("-title") + 1] == "utts"
    assert "-sound" not in cmd
    assert cmd[cmd.index("-execute") + 1] == "utts-notifications list"


def test_run_reports_start_failure_as_false() -> None:
    with patch("utts.notifier.subprocess.run", side_effect=OSError("boom")):
        assert TerminalNotifier()._run(["terminal-notifier"]) is False


def test_click_command_can_be_overridden(monkeypatch: Any) -> None:
    captured = _capture(monkeypatch)
    with patch("utts.notifier.shutil.which", return_value="/bin/terminal-notifier"):
        notifier = TerminalNotifier(list_command="/opt/bin/utts-notifications list --all")
        assert notifier.send_notification("hi", caller_name="ci: deploy") is True

    (cmd,) = captured
    assert cmd[cmd.index("-title") + 1] == "ci: deploy"
    assert cmd[cmd.index("-execute") + 1] == "/opt/bin/utts-notifications list --all"
