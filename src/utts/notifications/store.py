"""CRUD and query operations over the notification log.

Every read is a full scan of :class:`~utts.notifications.log_file.LogFile`;
there is no index. Every mutation (update, dismiss, dismiss-all, retention
sweep) is a full rewrite run through ``LogFile.transaction`` so the read and
the write happen under one lock.

Not-found is reported as ``None``, never as an exception, and a mutation
that targets a missing id does not touch the file.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from .log_file import LogFile
from .record import Notification

logger = logging.getLogger(__name__)

# Sort key for records whose timestamp cannot be parsed: older than anything.
_EPOCH_FLOOR = datetime.min.replace(tzinfo=UTC)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _sort_key(notification: Notification) -> datetime:
    return notification.parsed_timestamp() or _EPOCH_FLOOR


class NotificationStore:
    """Persistent notification history backed by a JSONL :class:`LogFile`."""

    def __init__(
        self,
        log_file: LogFile | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.log_file = log_file if log_file is not None else LogFile.from_settings()
        self._clock = clock

    def _now_iso(self) -> str:
        return self._clock().astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")

    # ---------------------------------------------------------------- writes

    def append(self, notification: Notification) -> Notification:
        """Persist ``notification`` and run the retention sweep."""
        self.log_file.append(notification)
        self.cleanup_old_entries()
        return notification

    def update(self, notification: Notification) -> Notification | None:
        """Replace the stored record with the same id; ``None`` if absent."""

        def replace(records: list[Notification]) -> list[Notification] | None:
            for index, existing in enumerate(records):
                if existing.id == notification.id:
                    records[index] = notification
                    return records
            return None

        if self.log_file.transaction(replace) is None:
            return None
        return notification

    def dismiss(self, notification_id: str) -> Notification | None:
        """Mark one record dismissed.

        Re-dismissing returns the record with its original ``dismissed_at``
        and leaves the file untouched.
        """
        found: list[Notification] = []

        def stamp(records: list[Notification]) -> list[Notification] | None:
            for index, existing in enumerate(records):
                if existing.id != notification_id:
                    continue
                found.append(existing)
                if existing.dismissed:
                    return None
                records[index] = existing.dismiss(self._now_iso())
                found[0] = records[index]
                return records
            return None

        self.log_file.transaction(stamp)
        return found[0] if found else None

    def dismiss_all(self) -> None:
        """Dismiss every undismissed record; existing dismissals are kept."""
        at = self._now_iso()

        def stamp_all(records: list[Notification]) -> list[Notification] | None:
            if all(n.dismissed for n in records):
                return None
            return [n.dismiss(at) for n in records]

        self.log_file.transaction(stamp_all)

    def cleanup_old_entries(self) -> None:
        """Drop records older than the configured retention window."""
        cutoff = self._clock() - timedelta(days=self.log_file.retention_days())

        def prune(records: list[Notification]) -> list[Notification] | None:
            kept = [n for n in records if _sort_key(n) >= cutoff]
            dropped = len(records) - len(kept)
            if not dropped:
                return None
            logger.info("Pruned %d notification(s) older than %s", dropped, cutoff)
            return kept

        self.log_file.transaction(prune)

    # ----------------------------------------------------------------- reads

    def all(self) -> list[Notification]:
        """Every parseable record, in file order."""
        return self.log_file.scan()

    def undismissed(self) -> list[Notification]:
        return [n for n in self.all() if not n.dismissed]

    def find(self, notification_id: str) -> Notification | None:
        """First record with ``id == notification_id``, or None."""
        return next((n for n in self.all() if n.id == notification_id), None)

    def list(
        self,
        limit: int | None = None,
        since: datetime | None = None,
        include_dismissed: bool = False,
    ) -> list[Notification]:
        """Most recent first, optionally bounded by ``since`` and ``limit``.

        Naive ``since`` values are interpreted as UTC. Equal timestamps keep
        their scan order.
        """
        results = self.all() if include_dismissed else self.undismissed()
        if since is not None:
            if since.tzinfo is None:
                since = since.replace(tzinfo=UTC)
            results = [n for n in results if _sort_key(n) >= since]
        results = sorted(results, key=_sort_key, reverse=True)
        if limit is not None:
            results = results[: max(limit, 0)]
        return results


__all__ = ["NotificationStore"]
