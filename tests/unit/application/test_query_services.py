"""Unit tests for the read-only query services."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from planecrazy.application.event_sourcing import InMemoryEventStore
from planecrazy.application.projections import (
    AircraftStateProjection,
    CommentProjection,
    FavouriteProjection,
)
from planecrazy.application.queries import (
    AircraftQueryService,
    CommentQueryService,
    FavouriteQueryService,
    distance_nm,
)
from planecrazy.domain.events import (
    AircraftFavourited,
    AircraftFirstSeen,
    AirportFavourited,
    CommentAdded,
    TypeFavourited,
)

_T0 = datetime(2026, 1, 1, tzinfo=UTC)


class _ReadSide:
    def __init__(self, *events) -> None:
        store = InMemoryEventStore()
        self.comments = CommentProjection(store)
        self.favourites = FavouriteProjection(store)
        self.aircraft = AircraftStateProjection(store)

        async def _run() -> None:
            for event in events:
                for projection in (self.comments, self.favourites, self.aircraft):
                    await projection.apply_event(event)

        asyncio.run(_run())


def _comment(comment_id: str, entity_type: str, entity_id: str) -> CommentAdded:
    return CommentAdded(entity_type=entity_type, entity_id=entity_id, comment_id=comment_id, text="nice")


def _seen(icao24: str, lat: float | None = None, lon: float | None = None) -> AircraftFirstSeen:
    return AircraftFirstSeen(icao24=icao24, first_seen_at=_T0, initial_latitude=lat, initial_longitude=lon)


class TestDistance:
    def test_zero(self) -> None:
        assert distance_nm(51.47, -0.45, 51.47, -0.45) == 0.0

    def test_one_degree_of_latitude_is_sixty_nm(self) -> None:
        assert distance_nm(0.0, 0.0, 1.0, 0.0) == pytest.approx(60.04, abs=0.05)


class TestCommentQueryService:
    def test_delegates(self) -> None:
        side = _ReadSide(_comment("c1", "Aircraft", "ABCDEF"))
        service = CommentQueryService(side.comments)
        assert service.get_comment_count("Aircraft", "abcdef") == 1
        assert service.get_comment_by_id("c1").text == "nice"
        assert len(service.get_active_comments("Aircraft", "ABCDEF")) == 1
        assert len(service.get_comments("Aircraft", "ABCDEF", include_deleted=True)) == 1
        assert service.get_entities_with_comments()[0].entity_id == "ABCDEF"


class TestFavouriteQueryService:
    def test_enriched_with_comment_count(self) -> None:
        side = _ReadSide(
            AircraftFavourited(icao24="ABCDEF", registration="G-EUPT"),
            TypeFavourited(type_code="A320"),
            AirportFavourited(icao_code="EGLL", name="Heathrow", latitude=51.47, longitude=-0.45),
            _comment("c1", "Aircraft", "ABCDEF"),
            _comment("c2", "Aircraft", "ABCDEF"),
        )
        service = FavouriteQueryService(side.favourites, side.comments)
        favourite = service.get_favourite("Aircraft", "ABCDEF")
        assert favourite.comment_count == 2
        assert favourite.registration == "G-EUPT"
        assert service.is_favourited("Type", "A320")
        assert [f.entity_id for f in service.get_favourite_aircraft()] == ["ABCDEF"]
        assert [f.entity_id for f in service.get_favourite_types()] == ["A320"]
        assert service.get_favourite_airports()[0].name == "Heathrow"
        assert len(service.get_all_favourites()) == 3
        assert service.get_favourite("Aircraft", "FFFFFF") is None


class TestAircraftQueryService:
    def test_by_icao24(self) -> None:
        side = _ReadSide(_seen("ABCDEF"), AircraftFavourited(icao24="ABCDEF"), _comment("c1", "Aircraft", "ABCDEF"))
        service = AircraftQueryService(side.aircraft, side.favourites, side.comments)
        result = service.get_by_icao24("abcdef")
        assert result.is_favourited
        assert result.comment_count == 1
        assert service.get_by_icao24("FFFFFF") is None
        assert len(service.get_all_aircraft()) == 1

    def test_details(self) -> None:
        side = _ReadSide(_seen("ABCDEF"), AircraftFavourited(icao24="ABCDEF", occurred_at=_T0),
                         _comment("c1", "Aircraft", "ABCDEF"))
        service = AircraftQueryService(side.aircraft, side.favourites, side.comments)
        details = service.get_aircraft_with_details("ABCDEF")
        assert details.is_favourited
        assert details.favourited_at == _T0
        assert [c.comment_id for c in details.comments] == ["c1"]
        assert service.get_aircraft_with_details("FFFFFF") is None

    def test_aircraft_with_comments(self) -> None:
        side = _ReadSide(
            _seen("AAAAAA"),
            _seen("BBBBBB"),
            _comment("c1", "Aircraft", "BBBBBB"),
            _comment("c2", "Type", "A320"),
            _comment("c3", "Aircraft", "CCCCCC"),
        )
        service = AircraftQueryService(side.aircraft, side.favourites, side.comments)
        assert [r.aircraft.icao24 for r in service.get_aircraft_with_comments()] == ["BBBBBB"]

    def test_near_favourite_airports(self) -> None:
        side = _ReadSide(
            AirportFavourited(icao_code="EGLL", name="Heathrow", latitude=51.47, longitude=-0.45),
            AirportFavourited(icao_code="KJFK"),
            _seen("AAAAAA", 51.60, -0.45),  # ~8 nm north
            _seen("BBBBBB", 51.48, -0.46),  # ~1 nm
            _seen("CCCCCC", 53.35, -2.27),  # Manchester
            _seen("DDDDDD"),
        )
        service = AircraftQueryService(side.aircraft, side.favourites, side.comments)
        [traffic] = service.get_aircraft_near_favourite_airports(radius_nm=20)
        assert traffic.icao_code == "EGLL"
        assert [n.aircraft.aircraft.icao24 for n in traffic.aircraft] == ["BBBBBB", "AAAAAA"]
        assert traffic.aircraft[0].distance_nm < traffic.aircraft[1].distance_nm
