"""Application event sourcing – EventDispatcher.

Dispatching an event means: append it to the store, then feed it to every
registered projection.  The store append is the only fatal step.  A
projection that raises is recorded in the result and the remaining
projections still run; the failed one is brought back with
:meth:`EventDispatcher.rebuild_projections`.
"""

from __future__ import annotations

import asyncio
import dataclasses
import time
from typing import Iterable, Sequence

from planecrazy.application.event_sourcing.projection import Projection
from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.kernel.ddd import DomainEvent
from planecrazy.kernel.errors import EventStoreWriteError, ProjectionError
from planecrazy.observability.logging import get_logger

logger = get_logger(__name__)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


@dataclasses.dataclass(frozen=True)
class ProjectionUpdateResult:
    """Outcome of feeding one event to one projection."""

    projection: str
    success: bool
    handled: bool = False
    error: ProjectionError | None = None
    elapsed_ms: float = 0.0


@dataclasses.dataclass(frozen=True)
class DispatchResult:
    """Outcome of dispatching a single event."""

    event: DomainEvent
    stored: bool
    store_error: EventStoreWriteError | None = None
    projection_results: tuple[ProjectionUpdateResult, ...] = ()
    elapsed_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Stored and accepted by every projection."""
        return self.stored and all(r.success for r in self.projection_results)

    @property
    def failed_projections(self) -> tuple[str, ...]:
        return tuple(r.projection for r in self.projection_results if not r.success)

    @property
    def handled_by(self) -> tuple[str, ...]:
        return tuple(r.projection for r in self.projection_results if r.handled)


@dataclasses.dataclass(frozen=True)
class BatchDispatchResult:
    results: tuple[DispatchResult, ...]
    total: int
    elapsed_ms: float = 0.0

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        """Events attempted that did not fully succeed."""
        return len(self.results) - self.successful

    @property
    def halted(self) -> bool:
        """``True`` when a store failure stopped the batch early."""
        return bool(self.results) and not self.results[-1].stored

    @property
    def all_successful(self) -> bool:
        return self.total == len(self.results) and self.failed == 0

    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 1.0
        return self.successful / self.total


@dataclasses.dataclass(frozen=True)
class ProjectionStatistics:
    count: int
    names: tuple[str, ...]


class EventDispatcher:
    """Coordinates store writes with projection updates.

    Dispatches are serialized, so every projection sees events one at a time
    and in the order they were stored.
    """

    def __init__(self, store: EventStore, projections: Iterable[Projection] = ()) -> None:
        self._store = store
        self._projections: list[Projection] = []
        self._lock = asyncio.Lock()
        for projection in projections:
            self.register(projection)

    @property
    def store(self) -> EventStore:
        return self._store

    @property
    def projections(self) -> tuple[Projection, ...]:
        return tuple(self._projections)

    def register(self, projection: Projection) -> None:
        if any(p.name == projection.name for p in self._projections):
            raise ValueError(f"Projection {projection.name!r} is already registered")
        self._projections.append(projection)

    def get_projection(self, name: str) -> Projection | None:
        return next((p for p in self._projections if p.name == name), None)

    async def dispatch(self, event: DomainEvent) -> DispatchResult:
        async with self._lock:
            return await self._dispatch(event)

    async def _dispatch(self, event: DomainEvent) -> DispatchResult:
        started = time.perf_counter()
        try:
            await self._store.append(event)
        except EventStoreWriteError as exc:
            logger.error(
                "dispatcher.store_failed",
                event_id=event.event_id,
                event_type=event.event_type,
                **exc.log_fields(),
            )
            return DispatchResult(
                event=event,
                stored=False,
                store_error=exc,
                elapsed_ms=_elapsed_ms(started),
            )

        results = []
        for projection in self._projections:
            results.append(await self._apply(projection, event))
        result = DispatchResult(
            event=event,
            stored=True,
            projection_results=tuple(results),
            elapsed_ms=_elapsed_ms(started),
        )
        logger.debug(
            "dispatcher.dispatched",
            event_id=event.event_id,
            event_type=event.event_type,
            handled_by=list(result.handled_by),
            failed=list(result.failed_projections),
            elapsed_ms=round(result.elapsed_ms, 3),
        )
        return result

    async def _apply(self, projection: Projection, event: DomainEvent) -> ProjectionUpdateResult:
        started = time.perf_counter()
        try:
            handled = await projection.apply_event(event)
        except Exception as exc:  # noqa: BLE001
            error = ProjectionError(projection.name, f"{type(exc).__name__}: {exc}", cause=exc)
            logger.warning(
                "dispatcher.projection_failed",
                projection=projection.name,
                event_id=event.event_id,
                event_type=event.event_type,
                **error.log_fields(),
            )
            return ProjectionUpdateResult(
                projection=projection.name,
                success=False,
                error=error,
                elapsed_ms=_elapsed_ms(started),
            )
        return ProjectionUpdateResult(
            projection=projection.name,
            success=True,
            handled=handled,
            elapsed_ms=_elapsed_ms(started),
        )

    async def dispatch_batch(self, events: Sequence[DomainEvent]) -> BatchDispatchResult:
        """Dispatch sequentially; stop only when the store rejects an event."""
        started = time.perf_counter()
        results: list[DispatchResult] = []
        for event in events:
            result = await self.dispatch(event)
            results.append(result)
            if not result.stored:
                logger.error(
                    "dispatcher.batch_halted",
                    dispatched=len(results) - 1,
                    remaining=len(events) - len(results),
                )
                break
        return BatchDispatchResult(
            results=tuple(results),
            total=len(events),
            elapsed_ms=_elapsed_ms(started),
        )

    def projection_statistics(self) -> ProjectionStatistics:
        names = tuple(p.name for p in self._projections)
        return ProjectionStatistics(count=len(names), names=names)

    async def rebuild_projections(self, names: Iterable[str] | None = None) -> dict[str, int]:
        """Rebuild the named projections (all when *names* is ``None``)."""
        wanted = set(names) if names is not None else None
        if wanted is not None:
            unknown = wanted - {p.name for p in self._projections}
            if unknown:
                raise KeyError(f"Unknown projection(s): {', '.join(sorted(unknown))}")
        rebuilt: dict[str, int] = {}
        async with self._lock:
            for projection in self._projections:
                if wanted is None or projection.name in wanted:
                    rebuilt[projection.name] = await projection.rebuild()
        return rebuilt


__all__ = [
    "BatchDispatchResult",
    "DispatchResult",
    "EventDispatcher",
    "ProjectionStatistics",
    "ProjectionUpdateResult",
]
