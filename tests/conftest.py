"""Shared fixtures: every test gets its own config directory."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from utts.core.settings import load_settings
from utts.notifications import LogFile, NotificationStore


@pytest.fixture  # type: ignore[misc]
def config_dir(tmp_path: Path, monkeypatch: Any) -> Generator[Path, None, None]:
    """Point UTTS_CONFIG_DIR at a temp dir and rebuild cached settings."""
    target = tmp_path / "utts"
    monkeypatch.setenv("UTTS_CONFIG_DIR", str(target))
    load_settings.cache_clear()
    yield target
    load_settings.cache_clear()


@pytest.fixture  # type: ignore[misc]
def log_file(config_dir: Path) -> LogFile:
    return LogFile(config_dir / "notifications.jsonl", config_dir / "settings.json")


@pytest.fixture  # type: ignore[misc]
def store(log_file: LogFile) -> NotificationStore:
    return NotificationStore(log_file)
