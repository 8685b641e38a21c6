"""Application projections – FavouriteProjection."""
from __future__ import annotations

import dataclasses
from datetime import datetime

from planecrazy.application.event_sourcing.projection import Projection
from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.domain.events import (
    AircraftFavourited,
    AircraftUnfavourited,
    AirportFavourited,
    AirportUnfavourited,
    TypeFavourited,
    TypeUnfavourited,
)
from planecrazy.domain.validation import EntityType, canonical_entity, canonical_entity_type
from planecrazy.kernel.ddd import DomainEvent


@dataclasses.dataclass(frozen=True)
class FavouriteView:
    entity_type: str
    entity_id: str
    favourited_at: datetime
    favourited_by: str | None = None
    registration: str | None = None
    type_code: str | None = None
    type_name: str | None = None
    airport_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class FavouriteProjection(Projection):
    """Current favourites keyed by ``(entity_type, entity_id)``."""

    name = "favourites"

    def __init__(self, store: EventStore) -> None:
        super().__init__(store)
        self._favourites: dict[tuple[str, str], FavouriteView] = {}

    def _apply(self, event: DomainEvent) -> bool:
        match event:
            case AircraftFavourited():
                self._put(
                    event,
                    registration=event.registration,
                    type_code=event.type_code,
                )
            case TypeFavourited():
                self._put(event, type_code=event.type_code, type_name=event.type_name)
            case AirportFavourited():
                self._put(
                    event,
                    airport_name=event.name,
                    latitude=event.latitude,
                    longitude=event.longitude,
                )
            case AircraftUnfavourited() | TypeUnfavourited() | AirportUnfavourited():
                self._favourites.pop((event.entity_type, event.entity_id), None)
            case _:
                return False
        return True

    def _put(self, event: AircraftFavourited | TypeFavourited | AirportFavourited, **extra: object) -> None:
        self._favourites[(event.entity_type, event.entity_id)] = FavouriteView(
            entity_type=event.entity_type,
            entity_id=event.entity_id,
            favourited_at=event.occurred_at,
            favourited_by=event.user,
            **extra,  # type: ignore[arg-type]
        )

    def _reset(self) -> None:
        self._favourites.clear()

    def _reset_entity(self, entity_type: str, entity_id: str) -> None:
        self._favourites.pop((entity_type, entity_id), None)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_favourited(self, entity_type: str, entity_id: str) -> bool:
        return canonical_entity(entity_type, entity_id) in self._favourites

    def get_favourite(self, entity_type: str, entity_id: str) -> FavouriteView | None:
        return self._favourites.get(canonical_entity(entity_type, entity_id))

    def get_favourites_by_type(self, entity_type: EntityType | str) -> list[FavouriteView]:
        kind = canonical_entity_type(entity_type)
        return [f for f in self._favourites.values() if f.entity_type == kind]

    def get_all_favourites(self) -> list[FavouriteView]:
        return list(self._favourites.values())

    def __len__(self) -> int:
        return len(self._favourites)


__all__ = ["FavouriteProjection", "FavouriteView"]
