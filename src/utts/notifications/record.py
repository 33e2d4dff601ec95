"""Notification record contract.

A :class:`Notification` is the only entity the store persists. Each one is a
single line of ``notifications.jsonl``::

    {"id":"3f9a1c0e","text":"build finished","caller":"ci: deploy",
     "agent":null,"voice":null,"timestamp":"2026-10-19T08:15:02Z",
     "metadata":{},"dismissed_at":null}

Construction fills ``id`` and ``timestamp`` when absent and does nothing
else: an empty ``text`` is accepted here and left for callers to reject.

Timestamp format
----------------
Timestamps are UTC ISO-8601 strings with second precision and a trailing
``"Z"``, e.g. ``"2026-10-19T08:15:02Z"``. They are stored as strings so the
serialized form is exactly what was written; :meth:`Notification.parsed_timestamp`
converts on demand for ordering and retention.
"""

from __future__ import annotations

import json
import secrets
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

FIELD_NAMES: tuple[str, ...] = (
    "id",
    "text",
    "caller",
    "agent",
    "voice",
    "timestamp",
    "metadata",
    "dismissed_at",
)


def new_id() -> str:
    """Return a short random identifier (8 hex chars)."""
    return secrets.token_hex(4)


def utc_now_iso() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SSZ``."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string into an aware ``datetime`` (naive means UTC)."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _normalize_key(key: Any) -> str:
    # Enum keys carry their wire name in `.value`; ":text" style keys come
    # from symbol-keyed producers.
    raw = getattr(key, "value", key)
    return str(raw).lstrip(":")


class Notification(BaseModel):
    """One spoken/displayed notification as persisted in the log."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default_factory=new_id, description="Short opaque identifier")
    text: str = Field(description="Spoken/displayed message body")
    caller: str | None = Field(default=None, description="Invoking context, e.g. 'proj: intent'")
    agent: str | None = Field(default=None, description="Logical agent persona")
    voice: str | None = Field(default=None, description="Synthesis voice id")
    timestamp: str = Field(default_factory=utc_now_iso, description="Creation time (UTC)")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Free-form payload")
    dismissed_at: str | None = Field(default=None, description="Dismissal time (UTC)")

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    # ------------------------------------------------------------------ state

    @property
    def dismissed(self) -> bool:
        """True once ``dismissed_at`` has been set."""
        return self.dismissed_at is not None

    def dismiss(self, at: str | None = None) -> Notification:
        """Return a dismissed copy, or ``self`` if already dismissed.

        An existing ``dismissed_at`` is never re-stamped.
        """
        if self.dismissed:
            return self
        return self.model_copy(update={"dismissed_at": at or utc_now_iso()})

    def parsed_timestamp(self) -> datetime | None:
        """Return ``timestamp`` as an aware datetime, or None if unparseable."""
        return parse_timestamp(self.timestamp)

    # ---------------------------------------------------------- serialization

    def to_dict(self) -> dict[str, Any]:
        """Return the canonical mapping with all eight keys."""
        return self.model_dump()

    def to_json(self) -> str:
        """Return the canonical single-line JSON form."""
        return self.model_dump_json()

    @classmethod
    def from_mapping(cls, data: Mapping[Any, Any]) -> Notification:
        """Rebuild a record from a loosely-keyed mapping.

        Keys are normalized to plain strings, unknown keys are ignored, and
        missing ``id``/``timestamp`` are default-filled. A missing ``text``
        becomes ``""``.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        normalized = {_normalize_key(k): v for k, v in data.items()}
        fields: dict[str, Any] = {
            name: normalized[name]
            for name in FIELD_NAMES
            if normalized.get(name) is not None
        }
        fields.setdefault("text", "")
        return cls(**fields)

    @classmethod
    def from_json(cls, raw: str) -> Notification:
        """Parse one serialized line; raises on malformed input."""
        return cls.from_mapping(json.loads(raw))


__all__ = ["Notification", "new_id", "utc_now_iso", "parse_timestamp", "FIELD_NAMES"]
