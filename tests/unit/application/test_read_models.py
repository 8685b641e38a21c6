"""Unit tests for the comment, favourite and aircraft-state projections."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

from planecrazy.application.event_sourcing import InMemoryEventStore
from planecrazy.application.projections import (
    AircraftStateProjection,
    CommentProjection,
    FavouriteProjection,
)
from planecrazy.domain.events import (
    AircraftFavourited,
    AircraftFirstSeen,
    AircraftIdentityUpdated,
    AircraftLastSeen,
    AircraftPositionUpdated,
    AircraftUnfavourited,
    AirportFavourited,
    CommentAdded,
    CommentDeleted,
    CommentEdited,
    TypeFavourited,
)

_T0 = datetime(2026, 1, 1, tzinfo=UTC)


def _at(seconds: int) -> datetime:
    return _T0 + timedelta(seconds=seconds)


def _feed(projection, *events) -> None:
    async def _run() -> None:
        for event in events:
            await projection.apply_event(event)

    asyncio.run(_run())


def _added(comment_id: str, entity_id: str = "A1B2C3", at: int = 0, text: str = "hi") -> CommentAdded:
    return CommentAdded(
        occurred_at=_at(at),
        entity_type="Aircraft",
        entity_id=entity_id,
        comment_id=comment_id,
        text=text,
        user="alice",
    )


class TestCommentProjection:
    def test_edit_and_soft_delete(self) -> None:
        projection = CommentProjection(InMemoryEventStore())
        _feed(
            projection,
            _added("c1"),
            CommentEdited(occurred_at=_at(1), entity_type="Aircraft", entity_id="A1B2C3",
                          comment_id="c1", text="Updated", user="bob"),
            CommentDeleted(occurred_at=_at(2), entity_type="Aircraft", entity_id="A1B2C3",
                           comment_id="c1", reason="spam"),
        )
        view = projection.get_comment_by_id("c1")
        assert view.text == "Updated"
        assert view.is_edited
        assert view.updated_by == "bob"
        assert view.is_deleted
        assert view.deletion_reason == "spam"
        assert projection.get_active_comments("Aircraft", "A1B2C3") == []
        assert len(projection.get_comments("Aircraft", "A1B2C3", include_deleted=True)) == 1
        assert len(projection) == 1

    def test_edit_without_add_is_ignored(self) -> None:
        projection = CommentProjection(InMemoryEventStore())
        orphan = CommentEdited(entity_type="Aircraft", entity_id="A1B2C3", comment_id="ghost", text="x")
        assert asyncio.run(projection.apply_event(orphan)) is True
        assert projection.get_comment_by_id("ghost") is None

    def test_queries_normalize_input_and_order_by_creation(self) -> None:
        projection = CommentProjection(InMemoryEventStore())
        _feed(projection, _added("c2", at=5, text="second"), _added("c1", at=1, text="first"))
        texts = [c.text for c in projection.get_active_comments("aircraft", "a1b2c3")]
        assert texts == ["first", "second"]
        assert projection.get_comment_count("Aircraft", "A1B2C3") == 2

    def test_entities_with_comments(self) -> None:
        projection = CommentProjection(InMemoryEventStore())
        _feed(projection, _added("c1", "AAAAAA"), _added("c2", "BBBBBB"), _added("c3", "BBBBBB"))
        entities = projection.get_entities_with_comments()
        assert [(e.entity_id, e.comment_count) for e in entities] == [("BBBBBB", 2), ("AAAAAA", 1)]

    def test_ignores_other_events(self) -> None:
        projection = CommentProjection(InMemoryEventStore())
        assert asyncio.run(projection.apply_event(AircraftFavourited(icao24="ABCDEF"))) is False


class TestFavouriteProjection:
    def test_favourite_and_unfavourite(self) -> None:
        projection = FavouriteProjection(InMemoryEventStore())
        _feed(
            projection,
            AircraftFavourited(occurred_at=_at(0), icao24="ABCDEF", registration="G-EUPT", user="alice"),
            TypeFavourited(occurred_at=_at(1), type_code="A320", type_name="Airbus A320"),
            AirportFavourited(occurred_at=_at(2), icao_code="EGLL", name="Heathrow", latitude=51.47, longitude=-0.45),
            AircraftUnfavourited(occurred_at=_at(3), icao24="ABCDEF"),
        )
        assert not projection.is_favourited("Aircraft", "ABCDEF")
        assert projection.is_favourited("type", "a320")
        assert projection.get_favourite("Airport", "EGLL").airport_name == "Heathrow"
        assert [f.entity_id for f in projection.get_all_favourites()] == ["A320", "EGLL"]
        assert len(projection) == 2

    def test_refavourite_replaces_view(self) -> None:
        projection = FavouriteProjection(InMemoryEventStore())
        _feed(
            projection,
            AircraftFavourited(occurred_at=_at(0), icao24="ABCDEF", user="alice"),
            AircraftUnfavourited(occurred_at=_at(1), icao24="ABCDEF"),
            AircraftFavourited(occurred_at=_at(2), icao24="ABCDEF", user="bob"),
        )
        view = projection.get_favourite("Aircraft", "ABCDEF")
        assert view.favourited_by == "bob"
        assert view.favourited_at == _at(2)

    def test_by_type(self) -> None:
        projection = FavouriteProjection(InMemoryEventStore())
        _feed(projection, AircraftFavourited(icao24="AAAAAA"), TypeFavourited(type_code="A320"))
        assert [f.entity_id for f in projection.get_favourites_by_type("Aircraft")] == ["AAAAAA"]


class TestAircraftStateProjection:
    def test_fold(self) -> None:
        projection = AircraftStateProjection(InMemoryEventStore())
        _feed(
            projection,
            AircraftFirstSeen(occurred_at=_at(0), icao24="ABCDEF", first_seen_at=_at(0), initial_latitude=51.0),
            AircraftPositionUpdated(occurred_at=_at(1), icao24="ABCDEF", timestamp=_at(1),
                                    latitude=51.5, longitude=-0.1, altitude=3000.0),
            AircraftIdentityUpdated(occurred_at=_at(2), icao24="ABCDEF", timestamp=_at(2),
                                    callsign="BAW123", registration="G-EUPT"),
            AircraftIdentityUpdated(occurred_at=_at(3), icao24="ABCDEF", timestamp=_at(3), squawk="7000"),
            AircraftLastSeen(occurred_at=_at(4), icao24="ABCDEF", last_seen_at=_at(4)),
        )
        state = projection.get_aircraft("abcdef")
        assert state.first_seen == _at(0)
        assert state.last_seen == _at(4)
        assert (state.latitude, state.longitude, state.altitude) == (51.5, -0.1, 3000.0)
        # a blank identity field leaves the known value in place
        assert (state.callsign, state.registration, state.squawk) == ("BAW123", "G-EUPT", "7000")
        assert state.total_updates == 3
        assert state.has_position

    def test_first_seen_is_not_overwritten(self) -> None:
        projection = AircraftStateProjection(InMemoryEventStore())
        _feed(
            projection,
            AircraftFirstSeen(icao24="ABCDEF", first_seen_at=_at(0)),
            AircraftFirstSeen(icao24="ABCDEF", first_seen_at=_at(9)),
        )
        assert projection.get_aircraft("ABCDEF").first_seen == _at(0)

    def test_position_without_first_seen_creates_record(self) -> None:
        projection = AircraftStateProjection(InMemoryEventStore())
        _feed(projection, AircraftPositionUpdated(icao24="ABCDEF", timestamp=_at(7), latitude=1.0, longitude=2.0))
        assert projection.get_aircraft("ABCDEF").first_seen == _at(7)

    def test_all_aircraft_most_recent_first(self) -> None:
        projection = AircraftStateProjection(InMemoryEventStore())
        _feed(
            projection,
            AircraftFirstSeen(icao24="AAAAAA", first_seen_at=_at(0)),
            AircraftFirstSeen(icao24="BBBBBB", first_seen_at=_at(5)),
        )
        assert [a.icao24 for a in projection.get_all_aircraft()] == ["BBBBBB", "AAAAAA"]
        assert projection.count() == 2

    def test_event_covered_by_rebuild_is_not_folded_again(self) -> None:
        store = InMemoryEventStore()
        projection = AircraftStateProjection(store)
        update = AircraftPositionUpdated(
            occurred_at=_at(0), icao24="ABCDEF", timestamp=_at(0), latitude=51.5, longitude=-0.1
        )

        async def _run() -> None:
            await store.append(update)
            await projection.rebuild()
            await projection.apply_event(update)

        asyncio.run(_run())
        state = projection.get_aircraft("ABCDEF")
        assert state is not None
        assert state.total_updates == 1
