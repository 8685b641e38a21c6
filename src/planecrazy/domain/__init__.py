"""Domain – aviation events, commands, validation and aggregates."""
from planecrazy.domain.aggregates import (
    CommentAggregate,
    CommentState,
    FavouriteAggregate,
    FavouriteState,
)
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
from planecrazy.domain.events import EVENT_TYPES
from planecrazy.domain.validation import EntityType, ValidationResult, normalize_code

__all__ = [
    "AddComment",
    "Command",
    "CommentAggregate",
    "CommentState",
    "DeleteComment",
    "EVENT_TYPES",
    "EditComment",
    "EntityType",
    "FavouriteAggregate",
    "FavouriteAircraft",
    "FavouriteAircraftType",
    "FavouriteAirport",
    "FavouriteState",
    "UnfavouriteAircraft",
    "UnfavouriteAircraftType",
    "UnfavouriteAirport",
    "ValidationResult",
    "normalize_code",
]
