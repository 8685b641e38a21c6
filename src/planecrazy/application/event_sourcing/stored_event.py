"""Application event sourcing – StoredEvent."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any


@dataclasses.dataclass(frozen=True)
class StoredEvent:
    """An event as persisted in the event store.

    ``payload`` holds the variant-specific fields of the original domain event
    as a JSON-compatible mapping; the identity fields live on the envelope.
    Once written, a record is never mutated.
    """

    event_type: str
    """Discriminator: the concrete event class name."""

    event_id: str
    """Globally unique event id."""

    occurred_at: datetime
    """UTC time at which the fact happened."""

    stream_id: str | None
    """Aggregate stream (``"<Prefix>-<id>"``) or ``None``."""

    payload: dict[str, Any] = dataclasses.field(default_factory=dict)
    """Variant fields (datetimes as ISO-8601 strings)."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "occurred_at": self.occurred_at.isoformat(),
            "stream_id": self.stream_id,
            "payload": self.payload,
        }


__all__ = ["StoredEvent"]
