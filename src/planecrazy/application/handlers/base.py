"""Application handlers – EventSourcedCommandHandler (shared command round trip).

Every command goes through the same steps:

1. ``command.validate()``; a failure returns ``Err(ValidationError)``.
2. Hold the per-stream lock for the rest of the round trip.
3. Load the aggregate's substream and replay it into a fresh aggregate.
4. Run the command method; an ``InvalidStateError`` returns ``Err``.
5. Persist the uncommitted events through the dispatcher (or the store).
6. Mark the events committed.
7. Rebuild the relevant projection for the affected entity.

Store write failures are not an expected outcome: they raise
:class:`~planecrazy.kernel.errors.EventStoreWriteError` and leave the
aggregate's buffer untouched.
"""
from __future__ import annotations

import abc
from typing import Generic, TypeVar

from planecrazy.application.cqrs import CommandHandler, CommandOutcome, KeyedLock
from planecrazy.application.event_sourcing.dispatcher import DispatchResult, EventDispatcher
from planecrazy.application.event_sourcing.loader import EventStreamLoader, FullScanStreamLoader
from planecrazy.application.event_sourcing.projection import Projection
from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.domain.commands import Command
from planecrazy.kernel.ddd import AggregateRoot
from planecrazy.kernel.errors import DomainError, InvalidStateError, ValidationError
from planecrazy.kernel.time import Clock, SystemClock
from planecrazy.kernel.types import Err, Ok, Result
from planecrazy.observability.logging import bound_context, get_logger

logger = get_logger(__name__)

C = TypeVar("C", bound=Command)
A = TypeVar("A", bound=AggregateRoot)


class EventSourcedCommandHandler(CommandHandler[C], Generic[C, A]):
    """Template for handlers whose command targets one event-sourced aggregate.

    Subclasses say which aggregate instance a command addresses, how to run
    the command on it and which entity's read model to refresh.
    """

    def __init__(
        self,
        store: EventStore,
        projection: Projection,
        *,
        dispatcher: EventDispatcher | None = None,
        loader: EventStreamLoader | None = None,
        locks: KeyedLock | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._projection = projection
        self._dispatcher = dispatcher
        self._loader = loader or FullScanStreamLoader(store)
        self._locks = locks or KeyedLock()
        self._clock = clock or SystemClock()

    @abc.abstractmethod
    def _create_aggregate(self, command: C) -> A:
        """Fresh, empty aggregate for the instance *command* addresses."""

    @abc.abstractmethod
    def _execute(self, aggregate: A, command: C) -> None:
        """Invoke the command method; raises ``InvalidStateError`` on violation."""

    @abc.abstractmethod
    def _entity(self, aggregate: A, command: C) -> tuple[str, str]:
        """``(entity_type, entity_id)`` whose read model must be refreshed."""

    async def handle(self, command: C) -> Result[CommandOutcome, DomainError]:
        command_name = type(command).__name__
        with bound_context(
            command=command_name,
            command_id=command.command_id,
            correlation_id=command.correlation_id,
        ):
            validation = command.validate()
            if not validation.valid:
                invalid = ValidationError(
                    f"{command_name} failed validation: {validation.error_message}",
                    errors=validation.errors,
                )
                logger.warning(
                    "command.rejected", errors=invalid.errors, **invalid.log_fields()
                )
                return Err(invalid)

            aggregate = self._create_aggregate(command)
            stream_id = aggregate.stream_id
            async with self._locks.hold(stream_id):
                aggregate.load_from_history(await self._loader.load(stream_id))
                try:
                    self._execute(aggregate, command)
                except InvalidStateError as exc:
                    logger.warning(
                        "command.rejected",
                        stream_id=stream_id,
                        state=exc.state,
                        **exc.log_fields(),
                    )
                    return Err(exc)

                events = aggregate.uncommitted_events
                dispatch_results = await self._persist(aggregate)
                aggregate.mark_events_as_committed()

            entity_type, entity_id = self._entity(aggregate, command)
            await self._projection.rebuild_for_entity(entity_type, entity_id)
            logger.info(
                "command.handled",
                stream_id=stream_id,
                events=[e.event_type for e in events],
                version=aggregate.version,
            )
            return Ok(
                CommandOutcome(
                    stream_id=stream_id,
                    events=events,
                    dispatch_results=dispatch_results,
                )
            )

    async def _persist(self, aggregate: A) -> tuple[DispatchResult, ...]:
        if self._dispatcher is None:
            for event in aggregate.uncommitted_events:
                await self._store.append(event)
            return ()
        results = []
        for event in aggregate.uncommitted_events:
            result = await self._dispatcher.dispatch(event)
            if result.store_error is not None:
                raise result.store_error
            results.append(result)
        return tuple(results)


__all__ = ["EventSourcedCommandHandler"]
