"""Domain – aviation event variants and the discriminator registry.

Each variant is a frozen dataclass; its class name is the discriminator that
is persisted with the payload.  :data:`EVENT_TYPES` maps discriminators back
to classes so the codec can decode records without reflection.
"""
from __future__ import annotations

import dataclasses
from datetime import datetime

from planecrazy.kernel.ddd import DomainEvent

__all__ = [
    "AircraftFavourited",
    "AircraftFirstSeen",
    "AircraftIdentityUpdated",
    "AircraftLastSeen",
    "AircraftPositionUpdated",
    "AircraftUnfavourited",
    "AirportFavourited",
    "AirportUnfavourited",
    "COMMENT_EVENTS",
    "CommentAdded",
    "CommentDeleted",
    "CommentEdited",
    "EVENT_TYPES",
    "FAVOURITE_EVENTS",
    "TRACKING_EVENTS",
    "TypeFavourited",
    "TypeUnfavourited",
    "comment_stream_id",
    "favourite_stream_id",
    "tracking_stream_id",
]


def comment_stream_id(comment_id: str) -> str:
    return f"Comment-{comment_id}"


def favourite_stream_id(entity_type: str, entity_id: str) -> str:
    return f"Favourite-{entity_type}_{entity_id}"


def tracking_stream_id(icao24: str) -> str:
    return f"Aircraft-{icao24}"


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, kw_only=True)
class _CommentEvent(DomainEvent):
    entity_type: str
    entity_id: str
    comment_id: str

    @property
    def stream_id(self) -> str:
        return comment_stream_id(self.comment_id)


@dataclasses.dataclass(frozen=True, kw_only=True)
class CommentAdded(_CommentEvent):
    text: str
    user: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class CommentEdited(_CommentEvent):
    text: str
    previous_text: str | None = None
    user: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class CommentDeleted(_CommentEvent):
    reason: str | None = None
    user: str | None = None


# ---------------------------------------------------------------------------
# Favourites
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, kw_only=True)
class _AircraftFavouriteEvent(DomainEvent):
    icao24: str
    user: str | None = None

    @property
    def entity_type(self) -> str:
        return "Aircraft"

    @property
    def entity_id(self) -> str:
        return self.icao24

    @property
    def stream_id(self) -> str:
        return favourite_stream_id("Aircraft", self.icao24)


@dataclasses.dataclass(frozen=True, kw_only=True)
class AircraftFavourited(_AircraftFavouriteEvent):
    registration: str | None = None
    type_code: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class AircraftUnfavourited(_AircraftFavouriteEvent):
    pass


@dataclasses.dataclass(frozen=True, kw_only=True)
class _TypeFavouriteEvent(DomainEvent):
    type_code: str
    user: str | None = None

    @property
    def entity_type(self) -> str:
        return "Type"

    @property
    def entity_id(self) -> str:
        return self.type_code

    @property
    def stream_id(self) -> str:
        return favourite_stream_id("Type", self.type_code)


@dataclasses.dataclass(frozen=True, kw_only=True)
class TypeFavourited(_TypeFavouriteEvent):
    type_name: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class TypeUnfavourited(_TypeFavouriteEvent):
    pass


@dataclasses.dataclass(frozen=True, kw_only=True)
class _AirportFavouriteEvent(DomainEvent):
    icao_code: str
    user: str | None = None

    @property
    def entity_type(self) -> str:
        return "Airport"

    @property
    def entity_id(self) -> str:
        return self.icao_code

    @property
    def stream_id(self) -> str:
        return favourite_stream_id("Airport", self.icao_code)


@dataclasses.dataclass(frozen=True, kw_only=True)
class AirportFavourited(_AirportFavouriteEvent):
    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class AirportUnfavourited(_AirportFavouriteEvent):
    pass


# ---------------------------------------------------------------------------
# Tracking (emitted on behalf of the acquisition collaborator)
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, kw_only=True)
class _TrackingEvent(DomainEvent):
    icao24: str

    @property
    def entity_type(self) -> str:
        return "Aircraft"

    @property
    def entity_id(self) -> str:
        return self.icao24

    @property
    def stream_id(self) -> str:
        return tracking_stream_id(self.icao24)


@dataclasses.dataclass(frozen=True, kw_only=True)
class AircraftFirstSeen(_TrackingEvent):
    first_seen_at: datetime
    initial_latitude: float | None = None
    initial_longitude: float | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class AircraftPositionUpdated(_TrackingEvent):
    timestamp: datetime
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None
    velocity: float | None = None
    track: float | None = None
    vertical_rate: float | None = None
    on_ground: bool = False


@dataclasses.dataclass(frozen=True, kw_only=True)
class AircraftIdentityUpdated(_TrackingEvent):
    timestamp: datetime
    registration: str | None = None
    type_code: str | None = None
    callsign: str | None = None
    squawk: str | None = None
    origin: str | None = None
    destination: str | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class AircraftLastSeen(_TrackingEvent):
    last_seen_at: datetime
    last_latitude: float | None = None
    last_longitude: float | None = None
    last_altitude: float | None = None


COMMENT_EVENTS: tuple[type[DomainEvent], ...] = (
    CommentAdded,
    CommentEdited,
    CommentDeleted,
)

FAVOURITE_EVENTS: tuple[type[DomainEvent], ...] = (
    AircraftFavourited,
    AircraftUnfavourited,
    TypeFavourited,
    TypeUnfavourited,
    AirportFavourited,
    AirportUnfavourited,
)

TRACKING_EVENTS: tuple[type[DomainEvent], ...] = (
    AircraftFirstSeen,
    AircraftPositionUpdated,
    AircraftIdentityUpdated,
    AircraftLastSeen,
)

EVENT_TYPES: dict[str, type[DomainEvent]] = {
    cls.__name__: cls for cls in (*COMMENT_EVENTS, *FAVOURITE_EVENTS, *TRACKING_EVENTS)
}
