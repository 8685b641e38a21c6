"""Testing – failure- and latency-injecting store and projection doubles."""
from __future__ import annotations

import asyncio
from typing import Iterable

from planecrazy.application.event_sourcing.projection import Projection
from planecrazy.application.event_sourcing.store import EventStore, InMemoryEventStore
from planecrazy.kernel.ddd import DomainEvent


class FailingEventStore(InMemoryEventStore):
    """In-memory store whose writes fail with ``OSError``.

    The first *succeed_first* writes go through; every write after that
    raises, as a full disk would.  Set :attr:`failing` to ``False`` to heal it.
    """

    def __init__(self, succeed_first: int = 0, **kwargs) -> None:
        super().__init__(**kwargs)
        self._remaining = succeed_first
        self.failing = True
        self.failed_writes = 0

    async def _write(self, event: DomainEvent, data: bytes) -> None:
        if self.failing and self._remaining <= 0:
            self.failed_writes += 1
            raise OSError(28, "No space left on device")
        self._remaining -= 1
        await super()._write(event, data)


class LaggingEventStore(InMemoryEventStore):
    """In-memory store whose chosen reads stall after taking their snapshot.

    Reads are numbered from 1.  A read listed in *lag_reads* returns the
    records as they were when it started, but only after *delay_ms*, so
    appends made in the meantime are missing from its result.
    """

    def __init__(self, lag_reads: Iterable[int] = (), delay_ms: float = 50.0, **kwargs) -> None:
        super().__init__(**kwargs)
        self._lag_reads = frozenset(lag_reads)
        self._delay = delay_ms / 1000
        self.reads = 0

    async def _read_records(self) -> list[tuple[str, bytes]]:
        self.reads += 1
        number = self.reads
        snapshot = await super()._read_records()
        if number in self._lag_reads:
            await asyncio.sleep(self._delay)
        return snapshot


class ExplodingProjection(Projection):
    """Projection that raises on every event of the given types (all, if none).

    Set :attr:`failing` to ``False`` to heal it before a rebuild.
    """

    name = "exploding"

    def __init__(self, store: EventStore, *event_types: str, error: Exception | None = None) -> None:
        super().__init__(store)
        self._event_types = frozenset(event_types)
        self._error = error or RuntimeError("projection failure")
        self.applied: list[DomainEvent] = []
        self.failing = True

    def _apply(self, event: DomainEvent) -> bool:
        if self.failing and (not self._event_types or event.event_type in self._event_types):
            raise self._error
        self.applied.append(event)
        return True

    def _reset(self) -> None:
        self.applied.clear()

    def _reset_entity(self, entity_type: str, entity_id: str) -> None:
        self.applied.clear()


__all__ = ["ExplodingProjection", "FailingEventStore", "LaggingEventStore"]
