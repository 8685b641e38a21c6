"""Unit tests for AggregateRoot and DomainEvent."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime

import pytest

from planecrazy.kernel.ddd import AggregateRoot, DomainEvent, entity_key


@dataclasses.dataclass(frozen=True, kw_only=True)
class CounterIncremented(DomainEvent):
    amount: int


class Counter(AggregateRoot):
    def __init__(self, id: str) -> None:  # noqa: A002
        super().__init__(id)
        self.total = 0

    def increment(self, amount: int) -> None:
        self._apply_change(CounterIncremented(amount=amount))

    def _apply(self, event: DomainEvent) -> None:
        if isinstance(event, CounterIncremented):
            self.total += event.amount


class TestDomainEvent:
    def test_identity_defaults(self) -> None:
        e1, e2 = CounterIncremented(amount=1), CounterIncremented(amount=1)
        assert e1.event_id != e2.event_id
        assert e1.occurred_at.tzinfo is not None

    def test_event_type_is_class_name(self) -> None:
        assert CounterIncremented(amount=1).event_type == "CounterIncremented"

    def test_frozen(self) -> None:
        event = CounterIncremented(amount=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.amount = 2  # type: ignore[misc]

    def test_entity_key_absent(self) -> None:
        assert entity_key(CounterIncremented(amount=1)) is None
        assert CounterIncremented(amount=1).stream_id is None


class TestAggregateRoot:
    def test_stream_id_uses_class_name_by_default(self) -> None:
        assert Counter("c1").stream_id == "Counter-c1"
        assert Counter.stream_id_for("x") == "Counter-x"

    def test_apply_change_buffers_and_bumps_version(self) -> None:
        counter = Counter("c1")
        counter.increment(2)
        counter.increment(3)
        assert counter.total == 5
        assert counter.version == 2
        assert len(counter.uncommitted_events) == 2

    def test_load_from_history_does_not_buffer(self) -> None:
        counter = Counter("c1")
        counter.load_from_history([CounterIncremented(amount=4), CounterIncremented(amount=1)])
        assert counter.total == 5
        assert counter.version == 2
        assert counter.uncommitted_events == ()

    def test_mark_events_as_committed(self) -> None:
        counter = Counter("c1")
        counter.increment(1)
        counter.mark_events_as_committed()
        assert counter.uncommitted_events == ()
        assert counter.version == 1

    def test_chunked_replay_matches_single_replay(self) -> None:
        history = [
            CounterIncremented(amount=n, occurred_at=datetime(2026, 1, 1, 0, 0, n, tzinfo=UTC))
            for n in range(1, 6)
        ]
        whole = Counter("c1")
        whole.load_from_history(history)
        chunked = Counter("c1")
        chunked.load_from_history(history[:2])
        chunked.load_from_history(history[2:])
        assert (whole.total, whole.version) == (chunked.total, chunked.version)
