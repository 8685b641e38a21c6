"""Application event sourcing – EventCodec (DomainEvent <-> record <-> bytes).

Decoding goes through a registry mapping each discriminator to its event
class, so adding a variant only means registering it.  Datetime fields are
written as ISO-8601 strings and restored from the class's type hints.
"""

from __future__ import annotations

import dataclasses
import functools
import json
import typing
from datetime import UTC, datetime
from typing import Any, Mapping

from planecrazy.application.event_sourcing.stored_event import StoredEvent
from planecrazy.domain.events import EVENT_TYPES
from planecrazy.kernel.ddd import DomainEvent
from planecrazy.kernel.errors import SerializationError

_ENVELOPE_FIELDS = frozenset({"event_id", "occurred_at"})


@functools.cache
def _datetime_fields(cls: type[DomainEvent]) -> frozenset[str]:
    hints = typing.get_type_hints(cls)
    names = set()
    for name, hint in hints.items():
        if hint is datetime or datetime in typing.get_args(hint):
            names.add(name)
    return frozenset(names)


@functools.cache
def _field_types(cls: type[DomainEvent]) -> dict[str, tuple[type, ...]]:
    hints = typing.get_type_hints(cls)
    types: dict[str, tuple[type, ...]] = {}
    for f in dataclasses.fields(cls):
        hint = hints[f.name]
        allowed = tuple(a for a in (typing.get_args(hint) or (hint,)) if isinstance(a, type))
        if float in allowed:
            allowed += (int,)
        types[f.name] = allowed
    return types


def _check_types(event: DomainEvent) -> None:
    for name, allowed in _field_types(type(event)).items():
        value = getattr(event, name)
        if isinstance(value, bool) and bool not in allowed:
            allowed = ()
        if not isinstance(value, allowed):
            raise SerializationError(
                f"Field '{name}' of {event.event_type} has type {type(value).__name__}",
                payload_type=event.event_type,
            )


def _parse_datetime(value: Any, *, field: str, event_type: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise SerializationError(
            f"Field '{field}' of {event_type} is not a timestamp",
            payload_type=event_type,
        )
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise SerializationError(
            f"Field '{field}' of {event_type} is not a valid ISO-8601 timestamp",
            payload_type=event_type,
            cause=exc,
        ) from exc
    # naive timestamps are read as UTC
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


class EventCodec:
    """Serialises domain events for the event store.

    Example::

        codec = EventCodec()
        data = codec.encode(event)
        assert codec.decode(data) == event
    """

    def __init__(self, registry: Mapping[str, type[DomainEvent]] | None = None) -> None:
        self._registry = dict(registry if registry is not None else EVENT_TYPES)

    @property
    def event_types(self) -> tuple[str, ...]:
        return tuple(self._registry)

    def to_record(self, event: DomainEvent) -> StoredEvent:
        if event.event_type not in self._registry:
            raise SerializationError(
                f"Unregistered event type {event.event_type!r}",
                payload_type=event.event_type,
            )
        payload: dict[str, Any] = {}
        for f in dataclasses.fields(event):
            if f.name in _ENVELOPE_FIELDS:
                continue
            value = getattr(event, f.name)
            payload[f.name] = value.isoformat() if isinstance(value, datetime) else value
        return StoredEvent(
            event_type=event.event_type,
            event_id=event.event_id,
            occurred_at=event.occurred_at,
            stream_id=event.stream_id,
            payload=payload,
        )

    def from_record(self, record: StoredEvent) -> DomainEvent:
        cls = self._registry.get(record.event_type)
        if cls is None:
            raise SerializationError(
                f"Unknown event type {record.event_type!r}",
                payload_type=record.event_type,
            )
        dt_fields = _datetime_fields(cls)
        known = {f.name for f in dataclasses.fields(cls)} - _ENVELOPE_FIELDS
        kwargs: dict[str, Any] = {}
        for name, value in record.payload.items():
            if name not in known:
                continue
            if name in dt_fields and value is not None:
                value = _parse_datetime(value, field=name, event_type=record.event_type)
            kwargs[name] = value
        try:
            event = cls(event_id=record.event_id, occurred_at=record.occurred_at, **kwargs)
        except TypeError as exc:
            raise SerializationError(
                f"Malformed payload for {record.event_type}: {exc}",
                payload_type=record.event_type,
                cause=exc,
            ) from exc
        _check_types(event)
        return event

    def encode(self, event: DomainEvent) -> bytes:
        record = self.to_record(event)
        try:
            return json.dumps(record.to_dict(), ensure_ascii=False, indent=2).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot encode {event.event_type}: {exc}",
                payload_type=event.event_type,
                cause=exc,
            ) from exc

    def decode(self, data: bytes | str) -> DomainEvent:
        try:
            raw = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SerializationError("Record is not valid JSON", cause=exc) from exc
        if not isinstance(raw, dict):
            raise SerializationError("Record is not a JSON object")
        event_type = raw.get("event_type")
        payload = raw.get("payload")
        if not isinstance(event_type, str) or not isinstance(payload, dict):
            raise SerializationError("Record is missing its discriminator or payload")
        event_id = raw.get("event_id")
        if not isinstance(event_id, str):
            raise SerializationError("Record is missing its event id", payload_type=event_type)
        record = StoredEvent(
            event_type=event_type,
            event_id=event_id,
            occurred_at=_parse_datetime(
                raw.get("occurred_at"), field="occurred_at", event_type=event_type
            ),
            stream_id=raw.get("stream_id"),
            payload=payload,
        )
        return self.from_record(record)


__all__ = ["EventCodec"]
