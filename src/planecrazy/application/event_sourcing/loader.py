"""Application event sourcing – stream loaders (history for one aggregate)."""

from __future__ import annotations

from typing import Protocol

from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.kernel.ddd import DomainEvent


class EventStreamLoader(Protocol):
    """Port: load the ordered substream of one aggregate instance."""

    async def load(self, stream_id: str) -> list[DomainEvent]: ...


class FullScanStreamLoader:
    """Reads the whole log and keeps the events of *stream_id*.

    O(n) in the size of the log per command.  An indexed loader can replace
    it without touching aggregates, handlers or the dispatcher.
    """

    def __init__(self, store: EventStore) -> None:
        self._store = store

    async def load(self, stream_id: str) -> list[DomainEvent]:
        return [e for e in await self._store.read_all() if e.stream_id == stream_id]


__all__ = ["EventStreamLoader", "FullScanStreamLoader"]
