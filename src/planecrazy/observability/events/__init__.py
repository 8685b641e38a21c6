"""Observability – structured diagnostics events."""
from planecrazy.observability.events.emitter import EventEmitter, StructuredEvent

__all__ = ["EventEmitter", "StructuredEvent"]
