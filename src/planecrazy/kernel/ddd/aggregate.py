"""AggregateRoot – replays history and gatekeeps new events."""

from __future__ import annotations

import abc
from typing import Iterable

from planecrazy.kernel.ddd.domain_event import DomainEvent
from planecrazy.kernel.time import Clock, SystemClock


class AggregateRoot(abc.ABC):
    """Event-sourced aggregate root.

    State is never persisted directly.  A fresh instance is built for each
    command, fed its stream with :meth:`load_from_history`, then asked to
    execute exactly one command method.  Command methods check their
    precondition, build one event and hand it to :meth:`_apply_change`, which
    runs the same transition function used during replay and buffers the
    event until the caller persists it.

    Subclasses implement :meth:`_apply` and may override
    :meth:`stream_prefix`.
    """

    _version: int
    _uncommitted: list[DomainEvent]

    def __init__(self, id: str, clock: Clock | None = None) -> None:  # noqa: A002
        self._id = id
        self._clock: Clock = clock or SystemClock()
        self._version = 0
        self._uncommitted = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def version(self) -> int:
        """Number of events applied, historical and new."""
        return self._version

    @property
    def uncommitted_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._uncommitted)

    @classmethod
    def stream_prefix(cls) -> str:
        """Prefix used to build the stream identifier (defaults to class name)."""
        return cls.__name__

    @classmethod
    def stream_id_for(cls, agg_id: str) -> str:
        """Build the canonical stream id: ``"<Prefix>-<id>"``."""
        return f"{cls.stream_prefix()}-{agg_id}"

    @property
    def stream_id(self) -> str:
        return self.stream_id_for(self._id)

    def load_from_history(self, history: Iterable[DomainEvent]) -> None:
        """Replay already-validated events without buffering them."""
        for event in history:
            self._apply(event)
            self._version += 1

    def mark_events_as_committed(self) -> None:
        """Clear the uncommitted buffer once the events are durably stored."""
        self._uncommitted.clear()

    def _apply_change(self, event: DomainEvent) -> None:
        """Apply a freshly raised event and record it as uncommitted."""
        self._apply(event)
        self._uncommitted.append(event)
        self._version += 1

    @abc.abstractmethod
    def _apply(self, event: DomainEvent) -> None:
        """Update internal state from a single event.

        Shared by replay and live commands, so it must be deterministic and
        must not raise for events the aggregate does not recognise.
        """

    def __repr__(self) -> str:  # pragma: no cover
        return f"{type(self).__name__}(id={self._id!r}, version={self._version})"


__all__ = ["AggregateRoot"]
