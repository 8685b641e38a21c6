"""Application event sourcing – EventStore port and InMemoryEventStore.

The store is the single source of truth.  Every implementation shares the
same append and replay rules, which live on the :class:`EventStore` base:

- appends are serialized by one ``asyncio.Lock`` and, once started, run to
  completion even if the caller is cancelled;
- ``read_all`` returns events stable-sorted by ``occurred_at`` so equal
  timestamps keep insertion order;
- a record that cannot be decoded is skipped, logged and reported on the
  diagnostics channel instead of failing the whole replay.

Backends implement :meth:`EventStore._write`, :meth:`EventStore._read_records`
and :meth:`EventStore.storage_bytes`.
"""

from __future__ import annotations

import abc
import asyncio
from datetime import UTC, datetime
from typing import Sequence

from planecrazy.application.event_sourcing.codec import EventCodec
from planecrazy.kernel.ddd import DomainEvent
from planecrazy.kernel.errors import EventStoreWriteError, SerializationError
from planecrazy.observability.events import EventEmitter, StructuredEvent
from planecrazy.observability.logging import get_logger

logger = get_logger(__name__)


class EventStore(abc.ABC):
    """Port – durable append-only event log."""

    def __init__(
        self,
        codec: EventCodec | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self._codec = codec or EventCodec()
        self._emitter = emitter or EventEmitter()
        self._write_lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def codec(self) -> EventCodec:
        return self._codec

    @property
    def emitter(self) -> EventEmitter:
        return self._emitter

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def _write(self, event: DomainEvent, data: bytes) -> None:
        """Durably persist one encoded record.  Called under the write lock."""

    @abc.abstractmethod
    async def _read_records(self) -> list[tuple[str, bytes]]:
        """Return ``(location, raw bytes)`` for every record in insertion order."""

    @abc.abstractmethod
    async def storage_bytes(self) -> int:
        """Bytes used by the persisted log."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def append(self, event: DomainEvent) -> None:
        """Durably persist *event*.

        Raises :class:`EventStoreWriteError` when the record could not be
        written; in that case nothing was recorded.
        """
        try:
            data = self._codec.encode(event)
        except SerializationError as exc:
            raise EventStoreWriteError(
                f"Cannot encode {event.event_type}",
                event_id=event.event_id,
                event_type=event.event_type,
                cause=exc,
            ) from exc
        task = asyncio.ensure_future(self._locked_write(event, data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        await asyncio.shield(task)

    async def _locked_write(self, event: DomainEvent, data: bytes) -> None:
        async with self._write_lock:
            try:
                await self._write(event, data)
            except OSError as exc:
                error = EventStoreWriteError(
                    f"Failed to append {event.event_type}",
                    event_id=event.event_id,
                    event_type=event.event_type,
                    cause=exc,
                )
                logger.error("event_store.append_failed", event_id=event.event_id, **error.log_fields())
                raise error from exc
        logger.debug(
            "event_store.appended",
            event_id=event.event_id,
            event_type=event.event_type,
            stream_id=event.stream_id,
        )

    async def read_all(self) -> list[DomainEvent]:
        """Every decodable event, ordered by ``occurred_at`` then insertion."""
        records = await self._read_records()
        events: list[DomainEvent] = []
        for location, data in records:
            try:
                events.append(self._codec.decode(data))
            except SerializationError as exc:
                self._record_skipped(location, exc.message)
        events.sort(key=lambda e: e.occurred_at)
        return events

    async def read_filtered(
        self,
        event_type: str | Sequence[str] | None = None,
        from_time: datetime | None = None,
        to_time: datetime | None = None,
        stream_id: str | None = None,
    ) -> list[DomainEvent]:
        """Post-filter over :meth:`read_all`; time bounds are inclusive."""
        if isinstance(event_type, str):
            types: frozenset[str] | None = frozenset({event_type})
        else:
            types = frozenset(event_type) if event_type is not None else None
        # naive bounds are read as UTC, like stored timestamps
        if from_time is not None and from_time.tzinfo is None:
            from_time = from_time.replace(tzinfo=UTC)
        if to_time is not None and to_time.tzinfo is None:
            to_time = to_time.replace(tzinfo=UTC)
        return [
            e
            for e in await self.read_all()
            if (types is None or e.event_type in types)
            and (from_time is None or e.occurred_at >= from_time)
            and (to_time is None or e.occurred_at <= to_time)
            and (stream_id is None or e.stream_id == stream_id)
        ]

    async def drain(self) -> None:
        """Wait for appends whose callers were cancelled to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _record_skipped(self, location: str, reason: str) -> None:
        logger.warning("event_store.record_skipped", location=location, reason=reason)
        self._emitter.emit(
            StructuredEvent(
                name="event_store.record_skipped",
                fields={"location": location, "reason": reason},
            )
        )


class InMemoryEventStore(EventStore):
    """In-memory :class:`EventStore` for tests and local development.

    Records are kept encoded, so decoding failures behave exactly as they do
    for the file-backed store.
    """

    def __init__(
        self,
        codec: EventCodec | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        super().__init__(codec, emitter)
        self._records: list[tuple[str, bytes]] = []

    async def _write(self, event: DomainEvent, data: bytes) -> None:
        self._records.append((f"memory:{len(self._records)}:{event.event_id}", data))

    async def _read_records(self) -> list[tuple[str, bytes]]:
        return list(self._records)

    async def storage_bytes(self) -> int:
        return sum(len(data) for _, data in self._records)

    def append_raw(self, data: bytes, location: str | None = None) -> None:
        """Insert a raw record verbatim, bypassing the codec."""
        self._records.append((location or f"memory:{len(self._records)}:raw", data))

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["EventStore", "InMemoryEventStore"]
