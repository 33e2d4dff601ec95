"""Disk-backed JSONL log of notification records.

Layout inside the config directory (default ``~/.config/utts``)::

    notifications.jsonl   one serialized Notification per line
    notifications.lock    sidecar used for exclusive flock()
    settings.json         {"retention_days": 5}

Primitives
----------
- ``append(record)``: one ``write()`` of one newline-terminated line in
  append mode.
- ``rewrite(records)``: write the whole sequence to a temp file in the same
  directory, fsync, then ``os.replace`` it over the log. Readers see either
  the old content or the new content, never a half-written file. The
  replacement keeps the permission bits of the file it replaces.
- ``scan()``: read every line; lines that do not parse are dropped.
- ``transaction(transform)``: lock, scan, transform, rewrite. The transform
  returns ``None`` to signal "nothing changed", in which case the file is
  not touched at all.

Concurrency
-----------
Independent CLI invocations share this file. With locking enabled, every
writer that goes through this class serializes on ``notifications.lock``,
so an ``append`` cannot land between the read and the write of a
transaction. A process that writes the file without taking the lock can
still lose lines to a concurrent rewrite.
"""

from __future__ import annotations

import fcntl
import logging
import os
import stat
import tempfile
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from utts.core.settings import Settings, load_settings

from .record import Notification

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 5

Transform = Callable[[list[Notification]], Sequence[Notification] | None]


class RetentionSettings(BaseModel):
    """User-editable retention policy stored in ``settings.json``."""

    retention_days: int = Field(default=DEFAULT_RETENTION_DAYS, ge=1)


def parse_line(line: str) -> Notification | None:
    """Best-effort parse of one log line; ``None`` for blank or corrupt lines."""
    stripped = line.strip()
    if not stripped:
        return None
    try:
        return Notification.from_json(stripped)
    except (ValueError, TypeError, RecursionError) as exc:
        logger.debug("Skipping malformed notification line: %s", exc)
        return None


class LogFile:
    """The physical notification log plus its companion settings file."""

    def __init__(
        self,
        path: Path,
        settings_path: Path | None = None,
        *,
        lock_enabled: bool = True,
    ) -> None:
        self.path = Path(path)
        self.settings_path = (
            Path(settings_path) if settings_path is not None else self.path.parent / "settings.json"
        )
        self.lock_enabled = lock_enabled

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> LogFile:
        """Build a log file rooted at the configured config directory."""
        s = settings if settings is not None else load_settings()
        return cls(s.notifications_file, s.settings_file, lock_enabled=s.lock_enabled)

    @property
    def lock_path(self) -> Path:
        return self.path.with_suffix(".lock")

    def ensure_dir(self) -> None:
        """Create the parent directory; an unwritable location raises OSError."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------- settings

    def retention_days(self) -> int:
        """Return ``retention_days`` from the settings file, or the default.

        A missing, unreadable or malformed settings file never raises.
        """
        if not self.settings_path.exists():
            return DEFAULT_RETENTION_DAYS
        try:
            raw = self.settings_path.read_text(encoding="utf-8")
            return RetentionSettings.model_validate_json(raw or "{}").retention_days
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            logger.warning(
                "Ignoring unusable settings file %s (%s); using retention_days=%d",
                self.settings_path,
                exc.__class__.__name__,
                DEFAULT_RETENTION_DAYS,
            )
            return DEFAULT_RETENTION_DAYS

    # ----------------------------------------------------------------- read

    def _iter_lines(self) -> Iterator[str]:
        if not self.path.exists():
            return
        with self.path.open("r", encoding="utf-8", errors="replace") as fh:
            yield from fh

    def scan(self) -> list[Notification]:
        """Return every parseable record in file order."""
        return [n for n in map(parse_line, self._iter_lines()) if n is not None]

    # ---------------------------------------------------------------- write

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self.lock_enabled:
            yield
            return
        self.ensure_dir()
        with self.lock_path.open("a") as lock_fd:
            fcntl.flock(lock_fd, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_fd, fcntl.LOCK_UN)

    def append(self, record: Notification) -> None:
        """Append one serialized record as a single line."""
        line = record.to_json() + "\n"
        with self._locked():
            self.ensure_dir()
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line)

    def _rewrite_unlocked(self, records: Iterable[Notification]) -> None:
        self.ensure_dir()
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                for record in records:
                    fh.write(record.to_json() + "\n")
                fh.flush()
                os.fsync(fh.fileno())
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def rewrite(self, records: Iterable[Notification]) -> None:
        """Atomically replace the whole file with ``records`` in the given order."""
        with self._locked():
            self._rewrite_unlocked(records)

    def transaction(self, transform: Transform) -> list[Notification] | None:
        """Run ``transform`` over the full record list under the write lock.

        Returns the sequence that was written, or ``None`` when the transform
        reported no change and the file was left untouched.
        """
        with self._locked():
            updated = transform(self.scan())
            if updated is None:
                return None
            written = list(updated)
            self._rewrite_unlocked(written)
            return written


__all__ = ["LogFile", "RetentionSettings", "parse_line", "DEFAULT_RETENTION_DAYS"]
