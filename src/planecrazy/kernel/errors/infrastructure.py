"""Infrastructure errors – event log I/O, serialisation, read-model failures."""

from __future__ import annotations

from typing import Any

from planecrazy.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure.error"


class EventStoreError(InfrastructureError):
    """The event store could not complete an operation."""

    default_code = "event_store.error"


class EventStoreWriteError(EventStoreError):
    """Appending an event failed; nothing was durably recorded."""

    default_code = "event_store.write_failed"

    def __init__(
        self,
        message: str,
        *,
        event_id: str | None = None,
        event_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.event_id = event_id
        self.event_type = event_type


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize an event record."""

    default_code = "event_store.serialization_failed"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class ProjectionError(InfrastructureError):
    """A projection failed to apply an already-stored event."""

    default_code = "projection.failed"

    def __init__(
        self,
        projection: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Projection '{projection}' failed", **kwargs)
        self.projection = projection


__all__ = [
    "EventStoreError",
    "EventStoreWriteError",
    "InfrastructureError",
    "ProjectionError",
    "SerializationError",
]
