"""Centralized process configuration using Pydantic Settings (v2).

This module exposes a cached `Settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files in the working directory: .env, .env.local

Only process-level knobs live here (where the config directory is, which
binaries to call, log level). The retention policy is user data and is read
from ``settings.json`` inside the config directory by
:mod:`utts.notifications.log_file`.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_CONFIG_DIR = Path("~/.config/utts")


class Settings(BaseSettings):
    """Typed process configuration loaded from env and `.env` files.

    Attributes
    ----------
    config_dir : Path
        Directory holding ``notifications.jsonl`` and ``settings.json``;
        maps from `UTTS_CONFIG_DIR`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    utts_bin : str
        Host CLI used to replay a notification; maps from `UTTS_BIN`.
    url_opener : str
        Command used to open `url` activation actions; maps from `UTTS_URL_OPENER`.
    lock_enabled : bool
        Whether read-modify-write sequences take an exclusive file lock;
        maps from `UTTS_LOCK_ENABLED`.
    """

    config_dir: Path = Field(
        default=DEFAULT_CONFIG_DIR, alias="UTTS_CONFIG_DIR", validate_default=True
    )
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    utts_bin: str = Field(default="utts", alias="UTTS_BIN")
    url_opener: str = Field(default="open", alias="UTTS_URL_OPENER")
    lock_enabled: bool = Field(default=True, alias="UTTS_LOCK_ENABLED")
    api_host: str = Field(default="127.0.0.1", alias="UTTS_API_HOST")
    api_port: int = Field(default=8765, alias="UTTS_API_PORT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("config_dir")
    @classmethod
    def _expand_user(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def notifications_file(self) -> Path:
        """Path of the JSONL notification log."""
        return self.config_dir / "notifications.jsonl"

    @property
    def settings_file(self) -> Path:
        """Path of the user-editable retention settings."""
        return self.config_dir / "settings.json"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    return Settings()


def get_logger(name: str = "utts") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
