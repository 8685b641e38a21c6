"""Domain aggregates – Comment and Favourite target."""
from planecrazy.domain.aggregates.comment import CommentAggregate, CommentState
from planecrazy.domain.aggregates.favourite import FavouriteAggregate, FavouriteState

__all__ = ["CommentAggregate", "CommentState", "FavouriteAggregate", "FavouriteState"]
