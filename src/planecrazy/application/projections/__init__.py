"""Application projections – comment, favourite and aircraft read models."""
from planecrazy.application.projections.aircraft import AircraftState, AircraftStateProjection
from planecrazy.application.projections.comments import (
    CommentedEntity,
    CommentProjection,
    CommentView,
)
from planecrazy.application.projections.favourites import FavouriteProjection, FavouriteView

__all__ = [
    "AircraftState",
    "AircraftStateProjection",
    "CommentProjection",
    "CommentView",
    "CommentedEntity",
    "FavouriteProjection",
    "FavouriteView",
]
