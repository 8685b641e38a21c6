"""Application handlers – event-sourced command handlers."""
from planecrazy.application.handlers.base import EventSourcedCommandHandler
from planecrazy.application.handlers.comments import (
    AddCommentHandler,
    DeleteCommentHandler,
    EditCommentHandler,
)
from planecrazy.application.handlers.favourites import (
    FavouriteAircraftHandler,
    FavouriteAircraftTypeHandler,
    FavouriteAirportHandler,
    UnfavouriteAircraftHandler,
    UnfavouriteAircraftTypeHandler,
    UnfavouriteAirportHandler,
)

__all__ = [
    "AddCommentHandler",
    "DeleteCommentHandler",
    "EditCommentHandler",
    "EventSourcedCommandHandler",
    "FavouriteAircraftHandler",
    "FavouriteAircraftTypeHandler",
    "FavouriteAirportHandler",
    "UnfavouriteAircraftHandler",
    "UnfavouriteAircraftTypeHandler",
    "UnfavouriteAirportHandler",
]
