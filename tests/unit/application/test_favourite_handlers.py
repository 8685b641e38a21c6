"""Unit tests for the favourite command handlers."""

from __future__ import annotations

import asyncio

import pytest

from planecrazy.application.cqrs import KeyedLock
from planecrazy.application.event_sourcing import EventDispatcher, InMemoryEventStore
from planecrazy.application.handlers import (
    FavouriteAircraftHandler,
    FavouriteAircraftTypeHandler,
    FavouriteAirportHandler,
    UnfavouriteAircraftHandler,
    UnfavouriteAircraftTypeHandler,
    UnfavouriteAirportHandler,
)
from planecrazy.application.projections import FavouriteProjection
from planecrazy.domain.aggregates import FavouriteAggregate
from planecrazy.domain.commands import (
    FavouriteAircraft,
    FavouriteAircraftType,
    FavouriteAirport,
    UnfavouriteAircraft,
    UnfavouriteAircraftType,
    UnfavouriteAirport,
)
from planecrazy.domain.events import AircraftFavourited, AircraftUnfavourited
from planecrazy.kernel.errors import EventStoreWriteError, InvalidStateError, ValidationError
from planecrazy.testing import ExplodingProjection, FailingEventStore, LaggingEventStore, StepClock


def _handlers(store: InMemoryEventStore, projection: FavouriteProjection, *extra_projections):
    dispatcher = EventDispatcher(store, [projection, *extra_projections])
    shared = {"dispatcher": dispatcher, "locks": KeyedLock(), "clock": StepClock()}
    return {
        FavouriteAircraft: FavouriteAircraftHandler(store, projection, **shared),
        UnfavouriteAircraft: UnfavouriteAircraftHandler(store, projection, **shared),
        FavouriteAircraftType: FavouriteAircraftTypeHandler(store, projection, **shared),
        UnfavouriteAircraftType: UnfavouriteAircraftTypeHandler(store, projection, **shared),
        FavouriteAirport: FavouriteAirportHandler(store, projection, **shared),
        UnfavouriteAirport: UnfavouriteAirportHandler(store, projection, **shared),
    }


def _send(handlers, command):
    return handlers[type(command)].handle(command)


class TestAircraft:
    def test_favourite_normalizes_identifiers(self) -> None:
        store = InMemoryEventStore()
        projection = FavouriteProjection(store)
        handlers = _handlers(store, projection)

        result = asyncio.run(
            _send(handlers, FavouriteAircraft(icao24="abcdef", registration="g-eupt", type_code="a320", user="alice"))
        )
        event = result.unwrap().event
        assert isinstance(event, AircraftFavourited)
        assert (event.icao24, event.registration, event.type_code) == ("ABCDEF", "G-EUPT", "A320")
        assert result.unwrap().stream_id == "Favourite-Aircraft_ABCDEF"
        view = projection.get_favourite("Aircraft", "abcdef")
        assert view.favourited_by == "alice"

    def test_double_favourite_is_a_state_error(self) -> None:
        store = InMemoryEventStore()
        handlers = _handlers(store, FavouriteProjection(store))

        async def _run():
            first = await _send(handlers, FavouriteAircraft(icao24="ABCDEF"))
            second = await _send(handlers, FavouriteAircraft(icao24="abcdef"))
            return first, second

        first, second = asyncio.run(_run())
        assert first.is_ok()
        assert isinstance(second.error, InvalidStateError)
        assert "already favourited" in second.error.message
        assert len(store) == 1

    def test_concurrent_favourites_store_one_event(self) -> None:
        store = InMemoryEventStore()
        handlers = _handlers(store, FavouriteProjection(store))

        async def _run():
            return await asyncio.gather(
                *(_send(handlers, FavouriteAircraft(icao24="ABCDEF")) for _ in range(5))
            )

        results = asyncio.run(_run())
        assert sum(1 for r in results if r.is_ok()) == 1
        assert len(store) == 1

    def test_concurrent_toggle_leaves_projection_matching_log(self) -> None:
        # read 2 is the favourite handler's refresh; it stalls while the unfavourite lands
        store = LaggingEventStore(lag_reads={2})
        projection = FavouriteProjection(store)
        handlers = _handlers(store, projection)

        async def _run():
            return await asyncio.gather(
                _send(handlers, FavouriteAircraft(icao24="ABCDEF")),
                _send(handlers, UnfavouriteAircraft(icao24="ABCDEF")),
            )

        favourited, unfavourited = asyncio.run(_run())
        assert favourited.is_ok() and unfavourited.is_ok()
        log = asyncio.run(store.read_all())
        assert [type(e) for e in log] == [AircraftFavourited, AircraftUnfavourited]
        assert projection.is_favourited("Aircraft", "ABCDEF") is False

    def test_unfavourite_round_trip(self) -> None:
        store = InMemoryEventStore()
        projection = FavouriteProjection(store)
        handlers = _handlers(store, projection)

        async def _run():
            await _send(handlers, FavouriteAircraft(icao24="ABCDEF"))
            return await _send(handlers, UnfavouriteAircraft(icao24="ABCDEF"))

        assert asyncio.run(_run()).is_ok()
        assert not projection.is_favourited("Aircraft", "ABCDEF")

    def test_unfavourite_unknown(self) -> None:
        store = InMemoryEventStore()
        handlers = _handlers(store, FavouriteProjection(store))
        result = asyncio.run(_send(handlers, UnfavouriteAircraft(icao24="ABCDEF")))
        assert isinstance(result.error, InvalidStateError)

    def test_invalid_icao24(self) -> None:
        store = InMemoryEventStore()
        handlers = _handlers(store, FavouriteProjection(store))
        result = asyncio.run(_send(handlers, FavouriteAircraft(icao24="nothex")))
        assert isinstance(result.error, ValidationError)
        assert len(store) == 0


class TestTypesAndAirports:
    def test_type_favourite(self) -> None:
        store = InMemoryEventStore()
        projection = FavouriteProjection(store)
        handlers = _handlers(store, projection)

        async def _run():
            await _send(handlers, FavouriteAircraftType(type_code="b77w", type_name="  Boeing 777-300ER "))
            await _send(handlers, FavouriteAircraftType(type_code="A320"))
            await _send(handlers, UnfavouriteAircraftType(type_code="A320"))

        asyncio.run(_run())
        [view] = projection.get_favourites_by_type("Type")
        assert (view.entity_id, view.type_name) == ("B77W", "Boeing 777-300ER")

    def test_airport_favourite(self) -> None:
        store = InMemoryEventStore()
        projection = FavouriteProjection(store)
        handlers = _handlers(store, projection)

        async def _run():
            await _send(handlers, FavouriteAirport(icao_code="egll", name="Heathrow", latitude=51.47, longitude=-0.45))
            return await _send(handlers, UnfavouriteAirport(icao_code="KJFK"))

        missing = asyncio.run(_run())
        assert isinstance(missing.error, InvalidStateError)
        view = projection.get_favourite("Airport", "EGLL")
        assert (view.airport_name, view.latitude, view.longitude) == ("Heathrow", 51.47, -0.45)


class TestFailures:
    def test_store_failure_keeps_uncommitted_events(self) -> None:
        store = FailingEventStore()
        projection = FavouriteProjection(store)
        captured: list[FavouriteAggregate] = []

        class CapturingHandler(FavouriteAircraftHandler):
            def _create_aggregate(self, command):
                aggregate = super()._create_aggregate(command)
                captured.append(aggregate)
                return aggregate

        handler = CapturingHandler(store, projection, dispatcher=EventDispatcher(store, [projection]))
        with pytest.raises(EventStoreWriteError):
            asyncio.run(handler.handle(FavouriteAircraft(icao24="ABCDEF")))
        assert len(captured[0].uncommitted_events) == 1
        assert not projection.is_favourited("Aircraft", "ABCDEF")

    def test_projection_failure_still_succeeds(self) -> None:
        store = InMemoryEventStore()
        projection = FavouriteProjection(store)
        handlers = _handlers(store, projection, ExplodingProjection(store))

        result = asyncio.run(_send(handlers, FavouriteAircraft(icao24="ABCDEF")))
        outcome = result.unwrap()
        assert not outcome.projections_consistent
        assert outcome.dispatch_results[0].failed_projections == ("exploding",)
        assert projection.is_favourited("Aircraft", "ABCDEF")
