"""Application tracking – AircraftTrackingService.

Turns observations supplied by the acquisition collaborator (whatever polls
the ADS-B feed) into tracking events.  An observation only produces the
events for what actually changed since the aircraft was last seen, plus an
``AircraftLastSeen`` every time.
"""
from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Iterable

from planecrazy.application.cqrs import KeyedLock
from planecrazy.application.event_sourcing.dispatcher import BatchDispatchResult, EventDispatcher
from planecrazy.application.projections import AircraftState, AircraftStateProjection
from planecrazy.domain.events import (
    AircraftFirstSeen,
    AircraftIdentityUpdated,
    AircraftLastSeen,
    AircraftPositionUpdated,
    tracking_stream_id,
)
from planecrazy.domain.validation import normalize_code, validate_icao24
from planecrazy.kernel.ddd import DomainEvent
from planecrazy.kernel.errors import ValidationError
from planecrazy.kernel.time import Clock, SystemClock
from planecrazy.observability.logging import get_logger

logger = get_logger(__name__)

_POSITION_FIELDS = ("latitude", "longitude", "altitude", "velocity", "track")
_IDENTITY_FIELDS = ("registration", "type_code", "callsign", "squawk", "origin", "destination")


@dataclasses.dataclass(frozen=True)
class AircraftObservation:
    """One sighting of an aircraft as reported by the data feed."""

    icao24: str
    observed_at: datetime | None = None
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

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class AircraftTrackingService:
    def __init__(
        self,
        dispatcher: EventDispatcher,
        aircraft: AircraftStateProjection,
        clock: Clock | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._aircraft = aircraft
        self._clock = clock or SystemClock()
        self._locks = KeyedLock()

    async def track(self, observation: AircraftObservation) -> BatchDispatchResult:
        """Dispatch the events implied by *observation*.

        Raises :class:`ValidationError` for a malformed ICAO24 address.
        """
        check = validate_icao24(observation.icao24)
        if not check.valid:
            raise ValidationError(
                f"Invalid aircraft observation: {check.error_message}", errors=check.errors
            )
        icao24 = normalize_code(observation.icao24)
        async with self._locks.hold(tracking_stream_id(icao24)):
            events = self._events_for(icao24, observation, self._aircraft.get_aircraft(icao24))
            result = await self._dispatcher.dispatch_batch(events)
        logger.debug(
            "tracking.observed",
            icao24=icao24,
            events=[e.event_type for e in events],
            stored=sum(1 for r in result.results if r.stored),
        )
        return result

    async def track_many(self, observations: Iterable[AircraftObservation]) -> list[BatchDispatchResult]:
        """Track a batch; malformed observations are logged and skipped."""
        results = []
        for observation in observations:
            try:
                results.append(await self.track(observation))
            except ValidationError as exc:
                logger.warning("tracking.observation_rejected", icao24=observation.icao24, errors=exc.errors)
        return results

    def _events_for(
        self, icao24: str, obs: AircraftObservation, existing: AircraftState | None
    ) -> list[DomainEvent]:
        now = self._clock.now()
        seen_at = obs.observed_at or now
        events: list[DomainEvent] = []
        if existing is None:
            events.append(
                AircraftFirstSeen(
                    occurred_at=now,
                    icao24=icao24,
                    first_seen_at=seen_at,
                    initial_latitude=obs.latitude,
                    initial_longitude=obs.longitude,
                )
            )
        if self._position_changed(existing, obs):
            events.append(
                AircraftPositionUpdated(
                    occurred_at=now,
                    icao24=icao24,
                    timestamp=seen_at,
                    latitude=obs.latitude,
                    longitude=obs.longitude,
                    altitude=obs.altitude,
                    velocity=obs.velocity,
                    track=obs.track,
                    vertical_rate=obs.vertical_rate,
                    on_ground=obs.on_ground,
                )
            )
        if self._identity_changed(existing, obs):
            events.append(
                AircraftIdentityUpdated(
                    occurred_at=now,
                    icao24=icao24,
                    timestamp=seen_at,
                    registration=obs.registration,
                    type_code=obs.type_code,
                    callsign=obs.callsign,
                    squawk=obs.squawk,
                    origin=obs.origin,
                    destination=obs.destination,
                )
            )
        events.append(
            AircraftLastSeen(
                occurred_at=now,
                icao24=icao24,
                last_seen_at=seen_at,
                last_latitude=obs.latitude,
                last_longitude=obs.longitude,
                last_altitude=obs.altitude,
            )
        )
        return events

    @staticmethod
    def _position_changed(existing: AircraftState | None, obs: AircraftObservation) -> bool:
        if existing is None:
            return any(getattr(obs, f) is not None for f in _POSITION_FIELDS)
        return any(getattr(existing, f) != getattr(obs, f) for f in _POSITION_FIELDS)

    @staticmethod
    def _identity_changed(existing: AircraftState | None, obs: AircraftObservation) -> bool:
        # a missing field in the feed is "unknown", not "cleared"
        provided = [f for f in _IDENTITY_FIELDS if getattr(obs, f)]
        if existing is None:
            return bool(provided)
        return any(getattr(existing, f) != getattr(obs, f) for f in provided)


__all__ = ["AircraftObservation", "AircraftTrackingService"]
