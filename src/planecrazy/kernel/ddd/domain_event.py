"""Domain events – the sole unit of persisted truth."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime
from uuid import uuid4


@dataclasses.dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for domain events.

    Subclasses add their own payload fields and declare themselves with the
    same ``frozen=True, kw_only=True`` options so required payload fields may
    follow the defaulted identity fields.

    Events about a tracked entity also expose ``entity_type`` and
    ``entity_id``, either as payload fields or as properties.

    Example::

        @dataclasses.dataclass(frozen=True, kw_only=True)
        class AircraftFavourited(DomainEvent):
            icao24: str

            @property
            def stream_id(self) -> str:
                return f"Favourite-Aircraft_{self.icao24}"
    """

    event_id: str = dataclasses.field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = dataclasses.field(
        default_factory=lambda: datetime.now(UTC)
    )

    @property
    def event_type(self) -> str:
        """Discriminator persisted alongside the payload."""
        return type(self).__name__

    @property
    def stream_id(self) -> str | None:
        """Aggregate stream this event belongs to (``"<Prefix>-<id>"``)."""
        return None


def entity_key(event: DomainEvent) -> tuple[str, str] | None:
    """Return ``(entity_type, entity_id)`` for *event*, or ``None``."""
    entity_type = getattr(event, "entity_type", None)
    entity_id = getattr(event, "entity_id", None)
    if entity_type is None or entity_id is None:
        return None
    return entity_type, entity_id


__all__ = ["DomainEvent", "entity_key"]
