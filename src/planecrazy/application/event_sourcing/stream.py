"""Application event sourcing – EventStreamService (read-only log browsing).

Pages, filters, summarises and exports the raw event log for diagnostics and
audit screens.  Nothing here writes to the store.
"""

from __future__ import annotations

import collections
import dataclasses
import enum
import json
import math
from datetime import datetime
from typing import Sequence

from planecrazy.application.event_sourcing.codec import EventCodec
from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.kernel.ddd import DomainEvent

DEFAULT_PAGE_SIZE = 50


class SortOrder(str, enum.Enum):
    TIMESTAMP_ASCENDING = "timestamp_ascending"
    TIMESTAMP_DESCENDING = "timestamp_descending"


@dataclasses.dataclass(frozen=True)
class EventStreamFilter:
    """Criteria for browsing the log.  Unset criteria match everything.

    ``search_text`` is matched case-insensitively against the event type
    and the serialised payload.
    """

    event_types: Sequence[str] | None = None
    stream_id: str | None = None
    from_time: datetime | None = None
    to_time: datetime | None = None
    search_text: str | None = None
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort_order: SortOrder = SortOrder.TIMESTAMP_ASCENDING

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")


@dataclasses.dataclass(frozen=True)
class EventStreamPage:
    events: tuple[DomainEvent, ...]
    total_count: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def first_event_timestamp(self) -> datetime | None:
        return self.events[0].occurred_at if self.events else None

    @property
    def last_event_timestamp(self) -> datetime | None:
        return self.events[-1].occurred_at if self.events else None


@dataclasses.dataclass(frozen=True)
class EventStreamStatistics:
    total_event_count: int
    event_counts_by_type: dict[str, int]
    oldest_event_timestamp: datetime | None
    newest_event_timestamp: datetime | None
    total_storage_bytes: int
    average_events_per_day: float
    most_common_event_type: str | None
    unique_stream_count: int


class EventStreamService:
    def __init__(self, store: EventStore, codec: EventCodec | None = None) -> None:
        self._store = store
        self._codec = codec or store.codec

    async def get_events(self, filter: EventStreamFilter) -> EventStreamPage:  # noqa: A002
        events = self._sorted(await self._matching(filter), filter.sort_order)
        start = (filter.page_number - 1) * filter.page_size
        return EventStreamPage(
            events=tuple(events[start : start + filter.page_size]),
            total_count=len(events),
            page_number=filter.page_number,
            page_size=filter.page_size,
        )

    async def get_events_by_stream(
        self, stream_id: str, page_number: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> EventStreamPage:
        return await self.get_events(
            EventStreamFilter(stream_id=stream_id, page_number=page_number, page_size=page_size)
        )

    async def get_events_by_time_range(
        self,
        from_time: datetime,
        to_time: datetime,
        page_number: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> EventStreamPage:
        return await self.get_events(
            EventStreamFilter(
                from_time=from_time,
                to_time=to_time,
                page_number=page_number,
                page_size=page_size,
            )
        )

    async def get_events_by_type(
        self, event_type: str, page_number: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> EventStreamPage:
        return await self.get_events(
            EventStreamFilter(event_types=(event_type,), page_number=page_number, page_size=page_size)
        )

    async def search_events(
        self, search_text: str, page_number: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> EventStreamPage:
        return await self.get_events(
            EventStreamFilter(search_text=search_text, page_number=page_number, page_size=page_size)
        )

    async def get_statistics(self) -> EventStreamStatistics:
        events = await self._store.read_all()
        counts = collections.Counter(e.event_type for e in events)
        oldest = events[0].occurred_at if events else None
        newest = events[-1].occurred_at if events else None
        average = 0.0
        if oldest is not None and newest is not None:
            days = (newest - oldest).total_seconds() / 86400
            average = len(events) / days if days >= 1 else float(len(events))
        return EventStreamStatistics(
            total_event_count=len(events),
            event_counts_by_type=dict(counts),
            oldest_event_timestamp=oldest,
            newest_event_timestamp=newest,
            total_storage_bytes=await self._store.storage_bytes(),
            average_events_per_day=average,
            most_common_event_type=counts.most_common(1)[0][0] if counts else None,
            unique_stream_count=len({e.stream_id for e in events if e.stream_id is not None}),
        )

    async def get_event_type_breakdown(self) -> dict[str, int]:
        """Event counts per type, most frequent first."""
        counts = collections.Counter(e.event_type for e in await self._store.read_all())
        return dict(counts.most_common())

    async def export_events(self, filter: EventStreamFilter | None = None) -> str:  # noqa: A002
        """All matching events (unpaged) as a JSON array of records."""
        filter = filter or EventStreamFilter()  # noqa: A001
        events = self._sorted(await self._matching(filter), filter.sort_order)
        return json.dumps(
            [self._codec.to_record(e).to_dict() for e in events],
            ensure_ascii=False,
            indent=2,
        )

    async def _matching(self, filter: EventStreamFilter) -> list[DomainEvent]:  # noqa: A002
        events = await self._store.read_filtered(
            event_type=filter.event_types or None,
            from_time=filter.from_time,
            to_time=filter.to_time,
            stream_id=filter.stream_id,
        )
        if filter.search_text:
            needle = filter.search_text.lower()
            events = [e for e in events if needle in self._haystack(e)]
        return events

    def _haystack(self, event: DomainEvent) -> str:
        record = self._codec.to_record(event)
        text = json.dumps(record.payload, ensure_ascii=False, default=str)
        return f"{record.event_type} {record.stream_id or ''} {text}".lower()

    @staticmethod
    def _sorted(events: list[DomainEvent], order: SortOrder) -> list[DomainEvent]:
        if order is SortOrder.TIMESTAMP_DESCENDING:
            # reverse of the log order keeps ties deterministic
            return list(reversed(events))
        return events


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "EventStreamFilter",
    "EventStreamPage",
    "EventStreamService",
    "EventStreamStatistics",
    "SortOrder",
]
