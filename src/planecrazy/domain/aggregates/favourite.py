"""Domain aggregates – Favourite target."""
from __future__ import annotations

import enum
from datetime import datetime

from planecrazy.domain.events import (
    AircraftFavourited,
    AircraftUnfavourited,
    AirportFavourited,
    AirportUnfavourited,
    TypeFavourited,
    TypeUnfavourited,
)
from planecrazy.domain.validation import EntityType
from planecrazy.kernel.ddd import AggregateRoot, DomainEvent
from planecrazy.kernel.errors import InvalidStateError
from planecrazy.kernel.time import Clock

_FAVOURITED = (AircraftFavourited, TypeFavourited, AirportFavourited)
_UNFAVOURITED = (AircraftUnfavourited, TypeUnfavourited, AirportUnfavourited)


class FavouriteState(str, enum.Enum):
    NOT_FAVOURITED = "not_favourited"
    FAVOURITED = "favourited"


class FavouriteAggregate(AggregateRoot):
    """Favourite status of one ``(entity_type, entity_id)`` target.

    Toggles between ``NOT_FAVOURITED`` and ``FAVOURITED``; each command is
    guarded by the opposite state.
    """

    def __init__(
        self,
        entity_type: EntityType | str,
        entity_id: str,
        clock: Clock | None = None,
    ) -> None:
        kind = EntityType.parse(entity_type) if isinstance(entity_type, str) else entity_type
        super().__init__(f"{kind.value}_{entity_id}", clock)
        self.entity_type = kind
        self.entity_id = entity_id
        self.state = FavouriteState.NOT_FAVOURITED
        self.favourited_at: datetime | None = None
        self.favourited_by: str | None = None

    @classmethod
    def stream_prefix(cls) -> str:
        return "Favourite"

    @property
    def is_favourited(self) -> bool:
        return self.state is FavouriteState.FAVOURITED

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def favourite_aircraft(
        self,
        registration: str | None = None,
        type_code: str | None = None,
        user: str | None = None,
    ) -> AircraftFavourited:
        self._require(EntityType.AIRCRAFT, favourited=False, operation="favourite_aircraft")
        event = AircraftFavourited(
            occurred_at=self._clock.now(),
            icao24=self.entity_id,
            registration=registration,
            type_code=type_code,
            user=user,
        )
        self._apply_change(event)
        return event

    def unfavourite_aircraft(self, user: str | None = None) -> AircraftUnfavourited:
        self._require(EntityType.AIRCRAFT, favourited=True, operation="unfavourite_aircraft")
        event = AircraftUnfavourited(
            occurred_at=self._clock.now(), icao24=self.entity_id, user=user
        )
        self._apply_change(event)
        return event

    def favourite_type(
        self, type_name: str | None = None, user: str | None = None
    ) -> TypeFavourited:
        self._require(EntityType.TYPE, favourited=False, operation="favourite_type")
        event = TypeFavourited(
            occurred_at=self._clock.now(),
            type_code=self.entity_id,
            type_name=type_name,
            user=user,
        )
        self._apply_change(event)
        return event

    def unfavourite_type(self, user: str | None = None) -> TypeUnfavourited:
        self._require(EntityType.TYPE, favourited=True, operation="unfavourite_type")
        event = TypeUnfavourited(
            occurred_at=self._clock.now(), type_code=self.entity_id, user=user
        )
        self._apply_change(event)
        return event

    def favourite_airport(
        self,
        name: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        user: str | None = None,
    ) -> AirportFavourited:
        self._require(EntityType.AIRPORT, favourited=False, operation="favourite_airport")
        event = AirportFavourited(
            occurred_at=self._clock.now(),
            icao_code=self.entity_id,
            name=name,
            latitude=latitude,
            longitude=longitude,
            user=user,
        )
        self._apply_change(event)
        return event

    def unfavourite_airport(self, user: str | None = None) -> AirportUnfavourited:
        self._require(EntityType.AIRPORT, favourited=True, operation="unfavourite_airport")
        event = AirportUnfavourited(
            occurred_at=self._clock.now(), icao_code=self.entity_id, user=user
        )
        self._apply_change(event)
        return event

    def _require(self, kind: EntityType, *, favourited: bool, operation: str) -> None:
        if self.entity_type is not kind:
            raise InvalidStateError(
                f"Cannot {operation} on a {self.entity_type.value} target",
                state=self.state.value,
                operation=operation,
            )
        if self.is_favourited != favourited:
            label = f"{kind.value} '{self.entity_id}'"
            message = (
                f"{label} is not favourited" if favourited else f"{label} is already favourited"
            )
            raise InvalidStateError(message, state=self.state.value, operation=operation)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _apply(self, event: DomainEvent) -> None:
        if isinstance(event, _FAVOURITED):
            self.state = FavouriteState.FAVOURITED
            self.favourited_at = event.occurred_at
            self.favourited_by = event.user
        elif isinstance(event, _UNFAVOURITED):
            self.state = FavouriteState.NOT_FAVOURITED
            self.favourited_at = None
            self.favourited_by = None


__all__ = ["FavouriteAggregate", "FavouriteState"]
