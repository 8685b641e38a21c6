"""DDD building blocks – public re-export surface."""

from planecrazy.kernel.ddd.aggregate import AggregateRoot
from planecrazy.kernel.ddd.domain_event import DomainEvent, entity_key

__all__ = ["AggregateRoot", "DomainEvent", "entity_key"]
