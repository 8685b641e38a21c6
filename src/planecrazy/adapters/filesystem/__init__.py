"""Filesystem adapter – JSON-file event store."""
from planecrazy.adapters.filesystem.event_store import JsonFileEventStore

__all__ = ["JsonFileEventStore"]
