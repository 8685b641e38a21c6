"""Application event sourcing – Projection base class.

A projection is a deterministic fold over the event log.  Its state is owned
by the instance and exposed only through query methods on the subclass.

Example::

    class FavouritedAircraft(Projection):
        name = "favourited_aircraft"

        def __init__(self, store: EventStore) -> None:
            super().__init__(store)
            self.icao24s: set[str] = set()

        def _apply(self, event: DomainEvent) -> bool:
            if isinstance(event, AircraftFavourited):
                self.icao24s.add(event.icao24)
                return True
            return False

        def _reset(self) -> None:
            self.icao24s.clear()

        def _reset_entity(self, entity_type: str, entity_id: str) -> None:
            self.icao24s.discard(entity_id)
"""

from __future__ import annotations

import abc
import asyncio

from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.kernel.ddd import DomainEvent, entity_key
from planecrazy.observability.logging import get_logger

logger = get_logger(__name__)


class Projection(abc.ABC):
    """Read-model builder fed by the dispatcher and rebuildable from the log.

    Rebuilds read the log while holding the projection's own lock, so a
    snapshot taken before a concurrent append can never be replayed over
    newer state.  The clear-and-replay phase contains no ``await``, so a
    query never observes a half-rebuilt view.

    Each event is folded at most once: an event already covered by a rebuild
    is skipped when the dispatcher delivers it afterwards.
    """

    name: str = "projection"

    def __init__(self, store: EventStore) -> None:
        self._store = store
        self._lock = asyncio.Lock()
        self._folded: set[str] = set()

    async def apply_event(self, event: DomainEvent) -> bool:
        """Fold one event into the view; ``False`` if the variant is not handled."""
        async with self._lock:
            if event.event_id in self._folded:
                return True
            return self._fold(event)

    async def rebuild(self) -> int:
        """Clear all state and replay the full log.  Returns events handled."""
        async with self._lock:
            events = await self._store.read_all()
            self._reset()
            self._folded.clear()
            handled = sum(1 for e in events if self._fold(e))
        logger.info("projection.rebuilt", projection=self.name, events=len(events), handled=handled)
        return handled

    async def rebuild_for_entity(self, entity_type: str, entity_id: str) -> int:
        """Clear and replay only the events about one tracked entity."""
        key = (entity_type, entity_id)
        async with self._lock:
            events = [e for e in await self._store.read_all() if entity_key(e) == key]
            self._reset_entity(entity_type, entity_id)
            self._folded.difference_update(e.event_id for e in events)
            handled = sum(1 for e in events if self._fold(e))
        logger.debug(
            "projection.entity_rebuilt",
            projection=self.name,
            entity_type=entity_type,
            entity_id=entity_id,
            handled=handled,
        )
        return handled

    def _fold(self, event: DomainEvent) -> bool:
        handled = self._apply(event)
        if handled:
            self._folded.add(event.event_id)
        return handled

    @abc.abstractmethod
    def _apply(self, event: DomainEvent) -> bool:
        """Update state from *event*; must not touch state for unknown variants."""

    @abc.abstractmethod
    def _reset(self) -> None:
        """Drop all state."""

    @abc.abstractmethod
    def _reset_entity(self, entity_type: str, entity_id: str) -> None:
        """Drop the state derived from one entity's events."""

    def __repr__(self) -> str:  # pragma: no cover
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["Projection"]
