"""Shared fixtures for the PlaneCrazy test suite."""

from __future__ import annotations

import pytest

from planecrazy.adapters.filesystem import JsonFileEventStore
from planecrazy.application.event_sourcing import InMemoryEventStore
from planecrazy.observability.events import EventEmitter
from planecrazy.testing import StepClock


@pytest.fixture
def clock() -> StepClock:
    return StepClock(seconds=1)


@pytest.fixture
def emitter() -> EventEmitter:
    return EventEmitter()


@pytest.fixture
def memory_store(emitter: EventEmitter) -> InMemoryEventStore:
    return InMemoryEventStore(emitter=emitter)


@pytest.fixture
def file_store(tmp_path, emitter: EventEmitter) -> JsonFileEventStore:
    return JsonFileEventStore(tmp_path / "Events", emitter=emitter)
