"""Observability – StructuredEvent and EventEmitter (diagnostics channel).

Components report conditions that are handled locally but must stay
visible to operators, such as a corrupted event record skipped during replay.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable

__all__ = [
    "EventEmitter",
    "StructuredEvent",
]


def _default_serializer(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class StructuredEvent:
    name: str
    service: str = "planecrazy"
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "service": self.service,
            "timestamp": self.timestamp.isoformat(),
            **self.fields,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=_default_serializer)


class EventEmitter:
    """Buffers StructuredEvents and forwards them to subscribers.

    Subscribers are plain callables invoked synchronously on :meth:`emit`.
    """

    def __init__(self) -> None:
        self._buffer: list[StructuredEvent] = []
        self._subscribers: list[Callable[[StructuredEvent], None]] = []

    def subscribe(self, callback: Callable[[StructuredEvent], None]) -> None:
        self._subscribers.append(callback)

    def emit(self, event: StructuredEvent) -> None:
        self._buffer.append(event)
        for callback in self._subscribers:
            callback(event)

    async def flush(self) -> int:
        count = len(self._buffer)
        self._buffer.clear()
        return count

    @property
    def buffered(self) -> list[StructuredEvent]:
        return list(self._buffer)

    def named(self, name: str) -> list[StructuredEvent]:
        """Buffered events with the given *name*."""
        return [e for e in self._buffer if e.name == name]
