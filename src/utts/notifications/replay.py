"""Replay a stored notification through the host ``utts`` CLI.

Replay is fire-and-forget: the child is started in its own session and
never waited on, so a slow TTS engine cannot block the dashboard. The
replayed message is logged again by the child with a caller tag of
``"replay: <original caller or id>"``.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence

from .record import Notification

logger = logging.getLogger(__name__)

# Starts argv without waiting; returns True when the process was spawned.
Launcher = Callable[[Sequence[str]], bool]


def build_replay_command(notification: Notification, utts_bin: str = "utts") -> list[str]:
    """Return the argv that speaks ``notification`` again.

    ``--voice`` is only passed when there is no ``--agent``, since the agent
    mapping already picks a voice.
    """
    cmd = [utts_bin, notification.text]
    if notification.agent:
        cmd += ["--agent", notification.agent]
    elif notification.voice:
        cmd += ["--voice", notification.voice]
    cmd += ["--caller", f"replay: {notification.caller or notification.id}"]
    return cmd


def spawn_detached(argv: Sequence[str]) -> bool:
    """Start ``argv`` detached from this process; failures are logged, not raised."""
    try:
        subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        logger.warning("Could not start replay command %s: %s", argv[0], exc)
        return False
    return True


__all__ = ["Launcher", "build_replay_command", "spawn_detached"]
