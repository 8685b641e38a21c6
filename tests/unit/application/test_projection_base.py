"""Unit tests for the Projection base class."""

from __future__ import annotations

import asyncio

from planecrazy.application.event_sourcing import EventStore, InMemoryEventStore, Projection
from planecrazy.domain.events import AircraftFavourited, AircraftUnfavourited, TypeFavourited
from planecrazy.kernel.ddd import DomainEvent


class FavouritedCodes(Projection):
    name = "favourited_codes"

    def __init__(self, store: EventStore) -> None:
        super().__init__(store)
        self.codes: list[tuple[str, str]] = []

    def _apply(self, event: DomainEvent) -> bool:
        if isinstance(event, (AircraftFavourited, TypeFavourited)):
            self.codes.append((event.entity_type, event.entity_id))
            return True
        return False

    def _reset(self) -> None:
        self.codes.clear()

    def _reset_entity(self, entity_type: str, entity_id: str) -> None:
        self.codes = [c for c in self.codes if c != (entity_type, entity_id)]


class TestApplyEvent:
    def test_reports_whether_handled(self) -> None:
        projection = FavouritedCodes(InMemoryEventStore())

        async def _run() -> tuple[bool, bool]:
            handled = await projection.apply_event(AircraftFavourited(icao24="ABCDEF"))
            ignored = await projection.apply_event(AircraftUnfavourited(icao24="ABCDEF"))
            return handled, ignored

        assert asyncio.run(_run()) == (True, False)
        assert projection.codes == [("Aircraft", "ABCDEF")]


class TestRebuild:
    def test_rebuild_replays_from_scratch(self) -> None:
        store = InMemoryEventStore()
        projection = FavouritedCodes(store)

        async def _run() -> tuple[int, int]:
            await store.append(AircraftFavourited(icao24="ABCDEF"))
            await store.append(TypeFavourited(type_code="A320"))
            await store.append(AircraftUnfavourited(icao24="ABCDEF"))
            first = await projection.rebuild()
            second = await projection.rebuild()
            return first, second

        assert asyncio.run(_run()) == (2, 2)
        assert projection.codes == [("Aircraft", "ABCDEF"), ("Type", "A320")]

    def test_rebuild_for_entity_touches_only_that_entity(self) -> None:
        store = InMemoryEventStore()
        projection = FavouritedCodes(store)

        async def _run() -> int:
            await store.append(AircraftFavourited(icao24="ABCDEF"))
            await store.append(TypeFavourited(type_code="A320"))
            projection.codes.append(("Aircraft", "ABCDEF"))  # stale entry
            return await projection.rebuild_for_entity("Aircraft", "ABCDEF")

        assert asyncio.run(_run()) == 1
        assert projection.codes == [("Aircraft", "ABCDEF")]
