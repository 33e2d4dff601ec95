"""Notification façade used by the CLI, the dashboard API and integrations.

This layer composes :class:`NotificationStore` with the two outside-world
side effects a notification can trigger:

- **Replay**: speak the text again through the host CLI.
- **Activate**: either call a registered handler, or run the ``shell``/``url``
  action stored in the record's metadata.

Activation handler
------------------
Integrations can override metadata-driven activation by registering a
handler with :meth:`Notifications.on_activate`. The handler lives on the
façade instance (seeded from :class:`NotificationsConfig`); registering again
replaces it and registering ``None`` clears it.

Usage
-----
>>> service = Notifications.from_settings()
>>> n = service.log("build finished", caller="ci: deploy")
>>> service.dismiss(n.id).dismissed
True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from utts.core.settings import Settings, load_settings

from .actions import CommandRunner, execute_action, parse_action, run_command
from .log_file import LogFile
from .record import Notification
from .replay import Launcher, build_replay_command, spawn_detached
from .store import NotificationStore

logger = logging.getLogger(__name__)

ActivationHandler = Callable[[Notification], Any]


@dataclass(slots=True)
class NotificationsConfig:
    """Collaborators injected into :class:`Notifications`.

    Parameters
    ----------
    store:
        The persistent store all operations go through.
    utts_bin:
        Host CLI used by replay.
    url_opener:
        Command that opens ``url`` actions (``open`` on macOS).
    launcher:
        Fire-and-forget process starter used by replay.
    runner:
        Blocking command runner used by activation actions.
    activation_handler:
        Optional override for metadata-driven activation.
    """

    store: NotificationStore
    utts_bin: str = "utts"
    url_opener: str = "open"
    launcher: Launcher = spawn_detached
    runner: CommandRunner = run_command
    activation_handler: ActivationHandler | None = field(default=None)


class Notifications:
    """High-level log/list/find/dismiss/replay/activate operations."""

    def __init__(self, config: NotificationsConfig) -> None:
        self.config = config
        self.store = config.store
        self._handler: ActivationHandler | None = config.activation_handler

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Notifications:
        """Wire a façade against the configured config directory."""
        s = settings if settings is not None else load_settings()
        store = NotificationStore(LogFile.from_settings(s))
        return cls(NotificationsConfig(store=store, utts_bin=s.utts_bin, url_opener=s.url_opener))

    # ---------------------------------------------------------------- store

    def log(
        self,
        text: str,
        caller: str | None = None,
        agent: str | None = None,
        voice: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Notification:
        """Record a new notification and return it."""
        notification = Notification(
            text=text,
            caller=caller,
            agent=agent,
            voice=voice,
            metadata=dict(metadata or {}),
        )
        return self.store.append(notification)

    def list(
        self,
        limit: int | None = None,
        since: datetime | None = None,
        include_dismissed: bool = False,
    ) -> list[Notification]:
        return self.store.list(limit=limit, since=since, include_dismissed=include_dismissed)

    def find(self, notification_id: str) -> Notification | None:
        return self.store.find(notification_id)

    def dismiss(self, notification_id: str) -> Notification | None:
        return self.store.dismiss(notification_id)

    def dismiss_all(self) -> None:
        self.store.dismiss_all()

    # --------------------------------------------------------- side effects

    def replay(self, notification_id: str) -> Notification | None:
        """Speak a stored notification again; the child is not awaited."""
        notification = self.find(notification_id)
        if notification is None:
            return None
        argv = build_replay_command(notification, self.config.utts_bin)
        if not self.config.launcher(argv):
            logger.warning("Replay of %s did not start", notification.id)
        return notification

    def on_activate(self, handler: ActivationHandler | None) -> None:
        """Register (or clear, with ``None``) the activation override."""
        self._handler = handler

    def activate(self, notification_id: str) -> Notification | None:
        """Run the handler, or the record's metadata action, for one record."""
        notification = self.find(notification_id)
        if notification is None:
            return None
        if self._handler is not None:
            self._handler(notification)
            return notification
        action = parse_action(notification.metadata)
        if action is not None:
            code = execute_action(
                action, runner=self.config.runner, url_opener=self.config.url_opener
            )
            if code != 0:
                logger.warning("Activation of %s exited with %d", notification.id, code)
        return notification

    @staticmethod
    def has_action(notification: Notification) -> bool:
        """True if the record carries a runnable activation action."""
        return parse_action(notification.metadata) is not None


__all__ = ["Notifications", "NotificationsConfig", "ActivationHandler"]
