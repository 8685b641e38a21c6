"""Testing – clocks and failure-injecting doubles for PlaneCrazy tests."""

from planecrazy.testing.clock import FakeClock, StepClock
from planecrazy.testing.fakes import ExplodingProjection, FailingEventStore, LaggingEventStore

__all__ = ["ExplodingProjection", "FailingEventStore", "FakeClock", "LaggingEventStore", "StepClock"]
