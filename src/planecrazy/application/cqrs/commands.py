"""Application CQRS – CommandHandler, CommandBus, InProcessCommandBus, KeyedLock."""
from __future__ import annotations

import abc
import asyncio
import contextlib
import dataclasses
from typing import TYPE_CHECKING, Any, AsyncIterator, Generic, TypeVar

from planecrazy.domain.commands import Command
from planecrazy.kernel.ddd import DomainEvent

if TYPE_CHECKING:
    from planecrazy.application.event_sourcing.dispatcher import DispatchResult

C = TypeVar("C", bound=Command)


@dataclasses.dataclass(frozen=True)
class CommandOutcome:
    """What a successful command changed."""

    stream_id: str
    events: tuple[DomainEvent, ...]
    dispatch_results: tuple["DispatchResult", ...] = ()

    @property
    def event(self) -> DomainEvent:
        """The single event the command produced."""
        return self.events[0]

    @property
    def projections_consistent(self) -> bool:
        """``False`` when any projection failed to apply the new events."""
        return all(r.success for r in self.dispatch_results)


class CommandHandler(abc.ABC, Generic[C]):
    """Handle a single command type."""

    @abc.abstractmethod
    async def handle(self, command: C) -> Any: ...


class CommandBus(abc.ABC):
    """Dispatches commands to their registered handlers."""

    @abc.abstractmethod
    def register(self, command_type: type[Command], handler: CommandHandler[Any]) -> None: ...

    @abc.abstractmethod
    async def dispatch(self, command: Command) -> Any: ...


class InProcessCommandBus(CommandBus):
    """In-process command bus (synchronous registry, async dispatch)."""

    def __init__(self) -> None:
        self._handlers: dict[type[Command], CommandHandler[Any]] = {}

    def register(self, command_type: type[Command], handler: CommandHandler[Any]) -> None:
        if command_type in self._handlers:
            raise ValueError(f"Handler already registered for {command_type.__name__!r}")
        self._handlers[command_type] = handler

    def handler_for(self, command_type: type[Command]) -> CommandHandler[Any] | None:
        return self._handlers.get(command_type)

    async def dispatch(self, command: Command) -> Any:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise KeyError(f"No handler registered for {type(command).__name__!r}")
        return await handler.handle(command)


class KeyedLock:
    """One ``asyncio.Lock`` per key, dropped once nobody holds or waits on it.

    Serializes the load-decide-append cycle of commands that target the same
    aggregate stream; commands on different streams run concurrently.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @contextlib.asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


__all__ = [
    "CommandBus",
    "CommandHandler",
    "CommandOutcome",
    "InProcessCommandBus",
    "KeyedLock",
]
