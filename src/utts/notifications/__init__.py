"""Notification store: record model, JSONL log, store and façade."""

from __future__ import annotations

from .actions import ShellAction, UrlAction, parse_action
from .log_file import LogFile, parse_line
from .record import Notification
from .service import Notifications, NotificationsConfig
from .store import NotificationStore

__all__ = [
    "Notification",
    "LogFile",
    "parse_line",
    "NotificationStore",
    "Notifications",
    "NotificationsConfig",
    "ShellAction",
    "UrlAction",
    "parse_action",
]
