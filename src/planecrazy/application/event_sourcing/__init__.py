"""Application event sourcing – store port, codec, projections, dispatcher."""

from planecrazy.application.event_sourcing.codec import EventCodec
from planecrazy.application.event_sourcing.dispatcher import (
    BatchDispatchResult,
    DispatchResult,
    EventDispatcher,
    ProjectionStatistics,
    ProjectionUpdateResult,
)
from planecrazy.application.event_sourcing.loader import EventStreamLoader, FullScanStreamLoader
from planecrazy.application.event_sourcing.projection import Projection
from planecrazy.application.event_sourcing.store import EventStore, InMemoryEventStore
from planecrazy.application.event_sourcing.stored_event import StoredEvent
from planecrazy.application.event_sourcing.stream import (
    EventStreamFilter,
    EventStreamPage,
    EventStreamService,
    EventStreamStatistics,
    SortOrder,
)

__all__ = [
    "BatchDispatchResult",
    "DispatchResult",
    "EventCodec",
    "EventDispatcher",
    "EventStore",
    "EventStreamFilter",
    "EventStreamLoader",
    "EventStreamPage",
    "EventStreamService",
    "EventStreamStatistics",
    "FullScanStreamLoader",
    "InMemoryEventStore",
    "Projection",
    "ProjectionStatistics",
    "ProjectionUpdateResult",
    "SortOrder",
    "StoredEvent",
]
