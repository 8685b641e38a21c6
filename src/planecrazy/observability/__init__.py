"""Observability – structlog logging and the diagnostics channel."""
from planecrazy.observability.events import EventEmitter, StructuredEvent
from planecrazy.observability.logging import LoggerFactory, bound_context, get_logger

__all__ = [
    "EventEmitter",
    "LoggerFactory",
    "StructuredEvent",
    "bound_context",
    "get_logger",
]
