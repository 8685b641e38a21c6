"""Application projections – CommentProjection.

Comments are soft-deleted: a ``CommentDeleted`` event flags the record and
keeps it, so audit lookups by id still find it while "active" queries skip it.
"""
from __future__ import annotations

import collections
import dataclasses
from datetime import datetime

from planecrazy.application.event_sourcing.projection import Projection
from planecrazy.application.event_sourcing.store import EventStore
from planecrazy.domain.events import CommentAdded, CommentDeleted, CommentEdited
from planecrazy.domain.validation import canonical_entity
from planecrazy.kernel.ddd import DomainEvent


@dataclasses.dataclass(frozen=True)
class CommentView:
    comment_id: str
    entity_type: str
    entity_id: str
    text: str
    created_at: datetime
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None
    is_deleted: bool = False
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    deletion_reason: str | None = None

    @property
    def is_edited(self) -> bool:
        return self.updated_at is not None


@dataclasses.dataclass(frozen=True)
class CommentedEntity:
    entity_type: str
    entity_id: str
    comment_count: int


class CommentProjection(Projection):
    name = "comments"

    def __init__(self, store: EventStore) -> None:
        super().__init__(store)
        # insertion order is the tie-break for equal creation times
        self._comments: dict[str, CommentView] = {}

    # ------------------------------------------------------------------
    # Fold
    # ------------------------------------------------------------------

    def _apply(self, event: DomainEvent) -> bool:
        match event:
            case CommentAdded():
                self._comments[event.comment_id] = CommentView(
                    comment_id=event.comment_id,
                    entity_type=event.entity_type,
                    entity_id=event.entity_id,
                    text=event.text,
                    created_at=event.occurred_at,
                    created_by=event.user,
                )
                return True
            case CommentEdited():
                current = self._comments.get(event.comment_id)
                if current is not None:
                    self._comments[event.comment_id] = dataclasses.replace(
                        current,
                        text=event.text,
                        updated_at=event.occurred_at,
                        updated_by=event.user,
                    )
                return True
            case CommentDeleted():
                current = self._comments.get(event.comment_id)
                if current is not None:
                    self._comments[event.comment_id] = dataclasses.replace(
                        current,
                        is_deleted=True,
                        deleted_at=event.occurred_at,
                        deleted_by=event.user,
                        deletion_reason=event.reason,
                    )
                return True
            case _:
                return False

    def _reset(self) -> None:
        self._comments.clear()

    def _reset_entity(self, entity_type: str, entity_id: str) -> None:
        key = (entity_type, entity_id)
        for comment_id in [
            c.comment_id for c in self._comments.values() if (c.entity_type, c.entity_id) == key
        ]:
            del self._comments[comment_id]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_comments(
        self, entity_type: str, entity_id: str, *, include_deleted: bool = False
    ) -> list[CommentView]:
        key = canonical_entity(entity_type, entity_id)
        matches = [
            c
            for c in self._comments.values()
            if (c.entity_type, c.entity_id) == key and (include_deleted or not c.is_deleted)
        ]
        return sorted(matches, key=lambda c: c.created_at)

    def get_active_comments(self, entity_type: str, entity_id: str) -> list[CommentView]:
        return self.get_comments(entity_type, entity_id)

    def get_comment_by_id(self, comment_id: str) -> CommentView | None:
        """Includes soft-deleted comments."""
        return self._comments.get(comment_id)

    def get_comment_count(self, entity_type: str, entity_id: str) -> int:
        return len(self.get_active_comments(entity_type, entity_id))

    def get_entities_with_comments(self) -> list[CommentedEntity]:
        """Entities with active comments, most commented first."""
        counts = collections.Counter(
            (c.entity_type, c.entity_id) for c in self._comments.values() if not c.is_deleted
        )
        return [
            CommentedEntity(entity_type=t, entity_id=i, comment_count=n)
            for (t, i), n in counts.most_common()
        ]

    def __len__(self) -> int:
        return len(self._comments)


__all__ = ["CommentProjection", "CommentView", "CommentedEntity"]
