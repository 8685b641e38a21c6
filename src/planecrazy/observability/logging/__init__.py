"""Observability – structured logging setup and helpers."""
from planecrazy.observability.logging.factory import LoggerFactory
from planecrazy.observability.logging.processors import bound_context, get_logger

__all__ = ["LoggerFactory", "bound_context", "get_logger"]
