"""Application projections – AircraftStateProjection (tracking read model)."""
from __future__ import annotations

import dataclasses
from datetime import datetime

from planecrazy.application.event_sourcing.projection import Projection
from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.domain.events import (
    AircraftFirstSeen,
    AircraftIdentityUpdated,
    AircraftLastSeen,
    AircraftPositionUpdated,
)
from planecrazy.domain.validation import normalize_code
from planecrazy.kernel.ddd import DomainEvent


@dataclasses.dataclass(frozen=True)
class AircraftState:
    icao24: str
    first_seen: datetime
    last_seen: datetime
    last_updated: datetime
    registration: str | None = None
    type_code: str | None = None
    callsign: str | None = None
    squawk: str | None = None
    origin: str | None = None
    destination: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None
    velocity: float | None = None
    track: float | None = None
    vertical_rate: float | None = None
    on_ground: bool = False
    total_updates: int = 0

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class AircraftStateProjection(Projection):
    """Latest known position and identity of every tracked aircraft.

    Position and identity updates for an aircraft without a
    ``AircraftFirstSeen`` still create its record, so a log with gaps
    replays without losing observations.
    """

    name = "aircraft_state"

    def __init__(self, store: EventStore) -> None:
        super().__init__(store)
        self._aircraft: dict[str, AircraftState] = {}

    def _apply(self, event: DomainEvent) -> bool:
        match event:
            case AircraftFirstSeen():
                if event.icao24 not in self._aircraft:
                    self._aircraft[event.icao24] = AircraftState(
                        icao24=event.icao24,
                        first_seen=event.first_seen_at,
                        last_seen=event.first_seen_at,
                        last_updated=event.occurred_at,
                        latitude=event.initial_latitude,
                        longitude=event.initial_longitude,
                    )
            case AircraftPositionUpdated():
                current = self._get_or_create(event.icao24, event.timestamp)
                self._aircraft[event.icao24] = dataclasses.replace(
                    current,
                    latitude=event.latitude,
                    longitude=event.longitude,
                    altitude=event.altitude,
                    velocity=event.velocity,
                    track=event.track,
                    vertical_rate=event.vertical_rate,
                    on_ground=event.on_ground,
                    last_seen=event.timestamp,
                    last_updated=event.occurred_at,
                    total_updates=current.total_updates + 1,
                )
            case AircraftIdentityUpdated():
                current = self._get_or_create(event.icao24, event.timestamp)
                changes = {
                    name: value
                    for name in ("registration", "type_code", "callsign", "squawk", "origin", "destination")
                    if (value := getattr(event, name))
                }
                self._aircraft[event.icao24] = dataclasses.replace(
                    current,
                    **changes,
                    last_seen=event.timestamp,
                    last_updated=event.occurred_at,
                    total_updates=current.total_updates + 1,
                )
            case AircraftLastSeen():
                current = self._get_or_create(event.icao24, event.last_seen_at)
                self._aircraft[event.icao24] = dataclasses.replace(
                    current,
                    last_seen=event.last_seen_at,
                    last_updated=event.occurred_at,
                    latitude=event.last_latitude if event.last_latitude is not None else current.latitude,
                    longitude=event.last_longitude if event.last_longitude is not None else current.longitude,
                    altitude=event.last_altitude if event.last_altitude is not None else current.altitude,
                )
            case _:
                return False
        return True

    def _get_or_create(self, icao24: str, seen_at: datetime) -> AircraftState:
        current = self._aircraft.get(icao24)
        if current is None:
            current = AircraftState(
                icao24=icao24, first_seen=seen_at, last_seen=seen_at, last_updated=seen_at
            )
        return current

    def _reset(self) -> None:
        self._aircraft.clear()

    def _reset_entity(self, entity_type: str, entity_id: str) -> None:
        if entity_type == "Aircraft":
            self._aircraft.pop(entity_id, None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_aircraft(self, icao24: str) -> AircraftState | None:
        return self._aircraft.get(normalize_code(icao24))

    def get_all_aircraft(self) -> list[AircraftState]:
        return sorted(self._aircraft.values(), key=lambda a: a.last_seen, reverse=True)

    def count(self) -> int:
        return len(self._aircraft)


__all__ = ["AircraftState", "AircraftStateProjection"]
