"""Application CQRS – command handling plumbing."""
from planecrazy.application.cqrs.commands import (
    CommandBus,
    CommandHandler,
    CommandOutcome,
    InProcessCommandBus,
    KeyedLock,
)

__all__ = [
    "CommandBus",
    "CommandHandler",
    "CommandOutcome",
    "InProcessCommandBus",
    "KeyedLock",
]
