# -----------------------------------------------------------------------------
# macOS banner notifications via `terminal-notifier`.
#
# The notifier is an outside collaborator of the store: it surfaces a message
# and reports success as a boolean. It never raises, so a missing binary or a
# failing command degrades to "no banner" rather than breaking the caller.
#
# Unit tests mock `_run()` (and `shutil.which`) so no real process is started.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

TERMINAL_NOTIFIER = "terminal-notifier"
LIST_COMMAND = "utts-notifications list"


@dataclass(slots=True)
class TerminalNotifier:
    """Thin wrapper around the `terminal-notifier` command.

    Parameters
    ----------
    binary:
        Name or path of the notifier executable.
    list_command:
        Shell command run when a banner is clicked; lists the history.
    group:
        Banner group id so repeated notifications replace each other.
    """

    binary: str = TERMINAL_NOTIFIER
    list_command: str = LIST_COMMAND
    group: str = "utts"
    _available: bool | None = field(default=None, init=False, repr=False)

    def available(self) -> bool:
        """Return True if the notifier binary is on PATH (cached)."""
        if self._available is None:
            self._available = shutil.which(self.binary) is not None
        return self._available

    def notify(
        self,
        text: str,
        title: str | None = None,
        subtitle: str | None = None,
        sound: bool = True,
        click_command: str | None = None,
    ) -> bool:
        """Show one banner; False if unavailable or the command failed."""
        if not self.available():
            return False

        cmd = [self.binary, "-message", text]
        if title:
            cmd += ["-title", title]
        if subtitle:
            cmd += ["-subtitle", subtitle]
        if sound:
            cmd += ["-sound", "default"]
        if click_command:
            cmd += ["-execute", click_command]
        cmd += ["-group", self.group]
        cmd += ["-ignoreDnD"]

        return self._run(cmd)

    def send_notification(
        self,
        notification_text: str,
        caller_name: str | None = None,
        muted: bool = False,
    ) -> bool:
        """Banner for a spoken utts message; clicking opens the listing."""
        if not self.available():
            return False
        return self.notify(
            text=notification_text,
            title=caller_name or "utts",
            sound=not muted,
            click_command=self.list_command,
        )

    def _run(self, cmd: Sequence[str]) -> bool:
        try:
            completed = subprocess.run(list(cmd), check=False, capture_output=True)
        except OSError as exc:
            logger.warning("%s failed to start: %s", self.binary, exc)
            return False
        return completed.returncode == 0


__all__ = ["TerminalNotifier", "TERMINAL_NOTIFIER", "LIST_COMMAND"]
