"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   ├── ValidationError
    │   └── InvalidStateError
    ├── ApplicationError     (application.py)
    │   └── ConfigError      (planecrazy.config.errors)
    └── InfrastructureError  (infrastructure.py)
        ├── EventStoreError
        │   └── EventStoreWriteError
        ├── SerializationError
        └── ProjectionError
"""

from planecrazy.kernel.errors.application import ApplicationError
from planecrazy.kernel.errors.base import BaseError
from planecrazy.kernel.errors.domain import (
    DomainError,
    InvalidStateError,
    ValidationError,
)
from planecrazy.kernel.errors.infrastructure import (
    EventStoreError,
    EventStoreWriteError,
    InfrastructureError,
    ProjectionError,
    SerializationError,
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
