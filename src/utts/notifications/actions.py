"""Activation actions carried in ``Notification.metadata["action"]``.

The set of action kinds is closed::

    {"type": "shell", "command": "code ~/src/project"}
    {"type": "url",   "url": "https://ci.example.com/run/42"}

Anything else (unknown ``type``, missing payload, non-object) parses to
``None`` and is ignored by activation.

Trust boundary
--------------
A ``shell`` action runs its command through ``/bin/sh`` with the user's
privileges, and a ``url`` action hands its URL to the system opener. Whoever
can write the notification log can therefore run commands on activation;
there is no sandboxing.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class ShellAction(BaseModel):
    """Run ``command`` through the shell."""

    model_config = ConfigDict(frozen=True)

    type: Literal["shell"] = "shell"
    command: str = Field(min_length=1)


class UrlAction(BaseModel):
    """Open ``url`` with the platform opener."""

    model_config = ConfigDict(frozen=True)

    type: Literal["url"] = "url"
    url: str = Field(min_length=1)


Action = Annotated[ShellAction | UrlAction, Field(discriminator="type")]

_ACTION_ADAPTER: TypeAdapter[ShellAction | UrlAction] = TypeAdapter(Action)

# Runs an argv (or a shell string when shell=True) and returns an exit code.
CommandRunner = Callable[..., int]


def run_command(args: str | list[str], *, shell: bool = False) -> int:
    """Default runner: block until the command exits, return its exit code."""
    try:
        return subprocess.run(args, shell=shell, check=False).returncode
    except OSError as exc:
        logger.warning("Action command failed to start: %s", exc)
        return 127


def parse_action(metadata: Mapping[str, Any] | None) -> ShellAction | UrlAction | None:
    """Extract the action from a metadata mapping, or ``None``."""
    if not metadata:
        return None
    raw = metadata.get("action")
    if not isinstance(raw, Mapping):
        return None
    try:
        return _ACTION_ADAPTER.validate_python(dict(raw))
    except ValidationError:
        logger.debug("Ignoring unsupported activation action: %r", raw)
        return None


def execute_action(
    action: ShellAction | UrlAction,
    *,
    runner: CommandRunner = run_command,
    url_opener: str = "open",
) -> int:
    """Run ``action`` and return the runner's exit code."""
    if isinstance(action, ShellAction):
        return runner(action.command, shell=True)
    return runner([url_opener, action.url])


__all__ = [
    "Action",
    "ShellAction",
    "UrlAction",
    "CommandRunner",
    "parse_action",
    "execute_action",
    "run_command",
]
