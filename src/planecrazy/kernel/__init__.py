"""Kernel – framework-agnostic building blocks."""

from planecrazy.kernel.errors import (
    ApplicationError,
    BaseError,
    DomainError,
    EventStoreError,
    EventStoreWriteError,
    InfrastructureError,
    InvalidStateError,
    ProjectionError,
    SerializationError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "EventStoreError",
    "EventStoreWriteError",
    "InfrastructureError",
    "InvalidStateError",
    "ProjectionError",
    "SerializationError",
    "ValidationError",
]
