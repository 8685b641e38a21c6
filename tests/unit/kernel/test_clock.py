"""Unit tests for kernel clocks."""

from __future__ import annotations

from datetime import UTC, datetime

from planecrazy.kernel.time import FrozenClock, SystemClock, utc_now


class TestSystemClock:
    def test_now_is_timezone_aware(self) -> None:
        assert SystemClock().now().tzinfo is not None

    def test_utc_now(self) -> None:
        assert utc_now().tzinfo is UTC


class TestFrozenClock:
    def test_returns_fixed_time(self) -> None:
        fixed = datetime(2026, 3, 1, tzinfo=UTC)
        clock = FrozenClock(fixed)
        assert clock.now() == fixed
        assert clock.now() == fixed

    def test_advance(self) -> None:
        clock = FrozenClock(datetime(2026, 3, 1, tzinfo=UTC))
        clock.advance(minutes=5)
        assert clock.now() == datetime(2026, 3, 1, 0, 5, tzinfo=UTC)
