"""Application queries – read-only services over the projections.

Results are frozen, already-enriched view objects.  Nothing here writes to
the store or to a projection.
"""
from __future__ import annotations

import dataclasses
import math
from datetime import datetime

from planecrazy.application.projections import (
    AircraftState,
    AircraftStateProjection,
    CommentedEntity,
    CommentProjection,
    CommentView,
    FavouriteProjection,
    FavouriteView,
)
from planecrazy.domain.validation import EntityType, canonical_entity

EARTH_RADIUS_NM = 3440.065


def distance_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle (haversine) distance in nautical miles."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_NM * math.asin(math.sqrt(a))


@dataclasses.dataclass(frozen=True)
class FavouriteResult:
    entity_type: str
    entity_id: str
    favourited_at: datetime
    comment_count: int
    favourited_by: str | None = None
    registration: str | None = None
    type_code: str | None = None
    type_name: str | None = None
    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclasses.dataclass(frozen=True)
class AircraftResult:
    aircraft: AircraftState
    is_favourited: bool
    comment_count: int


@dataclasses.dataclass(frozen=True)
class AircraftDetails:
    aircraft: AircraftResult
    comments: tuple[CommentView, ...]
    favourited_at: datetime | None

    @property
    def is_favourited(self) -> bool:
        return self.aircraft.is_favourited


@dataclasses.dataclass(frozen=True)
class NearbyAircraft:
    aircraft: AircraftResult
    distance_nm: float


@dataclasses.dataclass(frozen=True)
class AirportTraffic:
    icao_code: str
    name: str | None
    latitude: float
    longitude: float
    aircraft: tuple[NearbyAircraft, ...]


class CommentQueryService:
    def __init__(self, comments: CommentProjection) -> None:
        self._comments = comments

    def get_active_comments(self, entity_type: str, entity_id: str) -> list[CommentView]:
        return self._comments.get_active_comments(entity_type, entity_id)

    def get_comments(
        self, entity_type: str, entity_id: str, *, include_deleted: bool = False
    ) -> list[CommentView]:
        return self._comments.get_comments(entity_type, entity_id, include_deleted=include_deleted)

    def get_comment_by_id(self, comment_id: str) -> CommentView | None:
        return self._comments.get_comment_by_id(comment_id)

    def get_comment_count(self, entity_type: str, entity_id: str) -> int:
        return self._comments.get_comment_count(entity_type, entity_id)

    def get_entities_with_comments(self) -> list[CommentedEntity]:
        return self._comments.get_entities_with_comments()


class FavouriteQueryService:
    """Favourites enriched with the number of active comments on each target."""

    def __init__(self, favourites: FavouriteProjection, comments: CommentProjection) -> None:
        self._favourites = favourites
        self._comments = comments

    def is_favourited(self, entity_type: str, entity_id: str) -> bool:
        return self._favourites.is_favourited(entity_type, entity_id)

    def get_favourite(self, entity_type: str, entity_id: str) -> FavouriteResult | None:
        favourite = self._favourites.get_favourite(entity_type, entity_id)
        return self._enrich(favourite) if favourite is not None else None

    def get_all_favourites(self) -> list[FavouriteResult]:
        return [self._enrich(f) for f in self._favourites.get_all_favourites()]

    def get_favourites_by_type(self, entity_type: EntityType | str) -> list[FavouriteResult]:
        return [self._enrich(f) for f in self._favourites.get_favourites_by_type(entity_type)]

    def get_favourite_aircraft(self) -> list[FavouriteResult]:
        return self.get_favourites_by_type(EntityType.AIRCRAFT)

    def get_favourite_types(self) -> list[FavouriteResult]:
        return self.get_favourites_by_type(EntityType.TYPE)

    def get_favourite_airports(self) -> list[FavouriteResult]:
        return self.get_favourites_by_type(EntityType.AIRPORT)

    def _enrich(self, favourite: FavouriteView) -> FavouriteResult:
        return FavouriteResult(
            entity_type=favourite.entity_type,
            entity_id=favourite.entity_id,
            favourited_at=favourite.favourited_at,
            favourited_by=favourite.favourited_by,
            comment_count=self._comments.get_comment_count(
                favourite.entity_type, favourite.entity_id
            ),
            registration=favourite.registration,
            type_code=favourite.type_code,
            type_name=favourite.type_name,
            name=favourite.airport_name,
            latitude=favourite.latitude,
            longitude=favourite.longitude,
        )


class AircraftQueryService:
    """Tracked aircraft joined with their favourite status and comments."""

    def __init__(
        self,
        aircraft: AircraftStateProjection,
        favourites: FavouriteProjection,
        comments: CommentProjection,
    ) -> None:
        self._aircraft = aircraft
        self._favourites = favourites
        self._comments = comments

    def get_by_icao24(self, icao24: str) -> AircraftResult | None:
        state = self._aircraft.get_aircraft(icao24)
        return self._enrich(state) if state is not None else None

    def get_all_aircraft(self) -> list[AircraftResult]:
        return [self._enrich(a) for a in self._aircraft.get_all_aircraft()]

    def get_aircraft_with_details(self, icao24: str) -> AircraftDetails | None:
        result = self.get_by_icao24(icao24)
        if result is None:
            return None
        entity_type, entity_id = canonical_entity(EntityType.AIRCRAFT, icao24)
        favourite = self._favourites.get_favourite(entity_type, entity_id)
        return AircraftDetails(
            aircraft=result,
            comments=tuple(self._comments.get_active_comments(entity_type, entity_id)),
            favourited_at=favourite.favourited_at if favourite is not None else None,
        )

    def get_aircraft_with_comments(self) -> list[AircraftResult]:
        """Tracked aircraft with at least one active comment, most commented first."""
        results = []
        for entity in self._comments.get_entities_with_comments():
            if entity.entity_type != EntityType.AIRCRAFT.value:
                continue
            state = self._aircraft.get_aircraft(entity.entity_id)
            if state is not None:
                results.append(self._enrich(state))
        return results

    def get_aircraft_near_favourite_airports(
        self, radius_nm: float = 50.0
    ) -> list[AirportTraffic]:
        """Aircraft within *radius_nm* of each favourited airport with known coordinates."""
        positioned = [a for a in self._aircraft.get_all_aircraft() if a.has_position]
        traffic = []
        for airport in self._favourites.get_favourites_by_type(EntityType.AIRPORT):
            if airport.latitude is None or airport.longitude is None:
                continue
            nearby = []
            for state in positioned:
                assert state.latitude is not None and state.longitude is not None
                distance = distance_nm(
                    airport.latitude, airport.longitude, state.latitude, state.longitude
                )
                if distance <= radius_nm:
                    nearby.append(NearbyAircraft(aircraft=self._enrich(state), distance_nm=distance))
            if nearby:
                nearby.sort(key=lambda n: n.distance_nm)
                traffic.append(
                    AirportTraffic(
                        icao_code=airport.entity_id,
                        name=airport.airport_name,
                        latitude=airport.latitude,
                        longitude=airport.longitude,
                        aircraft=tuple(nearby),
                    )
                )
        return traffic

    def _enrich(self, state: AircraftState) -> AircraftResult:
        kind = EntityType.AIRCRAFT.value
        return AircraftResult(
            aircraft=state,
            is_favourited=self._favourites.is_favourited(kind, state.icao24),
            comment_count=self._comments.get_comment_count(kind, state.icao24),
        )


__all__ = [
    "AircraftDetails",
    "AircraftQueryService",
    "AircraftResult",
    "AirportTraffic",
    "CommentQueryService",
    "FavouriteQueryService",
    "FavouriteResult",
    "NearbyAircraft",
    "distance_nm",
]
