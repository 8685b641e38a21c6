"""Bootstrap – wire the store, projections, handlers and query services.

One :class:`Application` per process.  Projections live in memory, so
:meth:`Application.start` must replay the log before the first query::

    app = build_application()
    await app.start()
    result = await app.dispatch(FavouriteAircraft(icao24="4CA1FA"))
"""
from __future__ import annotations

import dataclasses
from typing import Any

from planecrazy.adapters.filesystem import JsonFileEventStore
from planecrazy.application.cqrs import InProcessCommandBus, KeyedLock
from planecrazy.application.event_sourcing import (
    EventDispatcher,
    EventStore,
    EventStreamService,
    FullScanStreamLoader,
)
from planecrazy.application.handlers import (
    AddCommentHandler,
    DeleteCommentHandler,
    EditCommentHandler,
    FavouriteAircraftHandler,
    FavouriteAircraftTypeHandler,
    FavouriteAirportHandler,
    UnfavouriteAircraftHandler,
    UnfavouriteAircraftTypeHandler,
    UnfavouriteAirportHandler,
)
from planecrazy.application.projections import (
    AircraftStateProjection,
    CommentProjection,
    FavouriteProjection,
)
from planecrazy.application.queries import (
    AircraftQueryService,
    CommentQueryService,
    FavouriteQueryService,
)
from planecrazy.application.tracking import AircraftTrackingService
from planecrazy.config import DotenvSettingsLoader, PlaneCrazySettings
from planecrazy.domain.commands import (
    AddComment,
    Command,
    DeleteComment,
    EditComment,
    FavouriteAircraft,
    FavouriteAircraftType,
    FavouriteAirport,
    UnfavouriteAircraft,
    UnfavouriteAircraftType,
    UnfavouriteAirport,
)
from planecrazy.kernel.time import Clock, SystemClock
from planecrazy.observability.events import EventEmitter
from planecrazy.observability.logging import LoggerFactory, get_logger

logger = get_logger(__name__)


@dataclasses.dataclass
class Application:
    settings: PlaneCrazySettings
    store: EventStore
    emitter: EventEmitter
    dispatcher: EventDispatcher
    command_bus: InProcessCommandBus
    comment_projection: CommentProjection
    favourite_projection: FavouriteProjection
    aircraft_projection: AircraftStateProjection
    comments: CommentQueryService
    favourites: FavouriteQueryService
    aircraft: AircraftQueryService
    event_stream: EventStreamService
    tracking: AircraftTrackingService

    async def start(self) -> dict[str, int]:
        """Rebuild every projection from the log.  Returns events handled per projection."""
        rebuilt = await self.dispatcher.rebuild_projections()
        logger.info("application.started", projections=rebuilt)
        return rebuilt

    async def dispatch(self, command: Command) -> Any:
        return await self.command_bus.dispatch(command)

    async def stop(self) -> None:
        """Wait for in-flight appends and flush buffered diagnostics."""
        await self.store.drain()
        await self.emitter.flush()


def build_application(
    settings: PlaneCrazySettings | None = None,
    *,
    store: EventStore | None = None,
    clock: Clock | None = None,
    configure_logging: bool = True,
) -> Application:
    """Compose the application.

    Without *settings* they are read from the environment (and ``.env``).
    Without *store* the JSON file store under ``settings.events_path`` is used,
    creating the data directories first.
    """
    settings = settings or DotenvSettingsLoader().load(PlaneCrazySettings)
    if configure_logging:
        LoggerFactory.configure(settings.log_level, json_output=settings.log_json)
    clock = clock or SystemClock()

    if store is None:
        settings.ensure_directories()
        emitter = EventEmitter()
        store = JsonFileEventStore(settings.events_path, emitter=emitter)
    else:
        emitter = store.emitter

    comment_projection = CommentProjection(store)
    favourite_projection = FavouriteProjection(store)
    aircraft_projection = AircraftStateProjection(store)
    dispatcher = EventDispatcher(
        store, [comment_projection, favourite_projection, aircraft_projection]
    )

    shared: dict[str, Any] = {
        "dispatcher": dispatcher,
        "loader": FullScanStreamLoader(store),
        "locks": KeyedLock(),
        "clock": clock,
    }
    bus = InProcessCommandBus()
    bus.register(AddComment, AddCommentHandler(store, comment_projection, **shared))
    bus.register(EditComment, EditCommentHandler(store, comment_projection, **shared))
    bus.register(DeleteComment, DeleteCommentHandler(store, comment_projection, **shared))
    for command_type, handler_type in (
        (FavouriteAircraft, FavouriteAircraftHandler),
        (UnfavouriteAircraft, UnfavouriteAircraftHandler),
        (FavouriteAircraftType, FavouriteAircraftTypeHandler),
        (UnfavouriteAircraftType, UnfavouriteAircraftTypeHandler),
        (FavouriteAirport, FavouriteAirportHandler),
        (UnfavouriteAirport, UnfavouriteAirportHandler),
    ):
        bus.register(command_type, handler_type(store, favourite_projection, **shared))

    logger.debug("application.built", store=type(store).__name__, base_path=str(settings.base_path))
    return Application(
        settings=settings,
        store=store,
        emitter=emitter,
        dispatcher=dispatcher,
        command_bus=bus,
        comment_projection=comment_projection,
        favourite_projection=favourite_projection,
        aircraft_projection=aircraft_projection,
        comments=CommentQueryService(comment_projection),
        favourites=FavouriteQueryService(favourite_projection, comment_projection),
        aircraft=AircraftQueryService(aircraft_projection, favourite_projection, comment_projection),
        event_stream=EventStreamService(store),
        tracking=AircraftTrackingService(dispatcher, aircraft_projection, clock=clock),
    )


__all__ = ["Application", "build_application"]
