"""Domain aggregates – Comment."""
from __future__ import annotations

import enum
from datetime import datetime

from planecrazy.domain.events import CommentAdded, CommentDeleted, CommentEdited
from planecrazy.kernel.ddd import AggregateRoot, DomainEvent
from planecrazy.kernel.errors import InvalidStateError
from planecrazy.kernel.time import Clock


class CommentState(str, enum.Enum):
    NON_EXISTENT = "non_existent"
    ACTIVE = "active"
    DELETED = "deleted"


class CommentAggregate(AggregateRoot):
    """One comment's lifecycle: ``NON_EXISTENT -> ACTIVE -> DELETED``.

    ``DELETED`` is soft-terminal: every further mutation is refused, but the
    replayed state (text, author, timestamps) is still available.
    """

    def __init__(self, id: str, clock: Clock | None = None) -> None:  # noqa: A002
        super().__init__(id, clock)
        self.state = CommentState.NON_EXISTENT
        self.entity_type: str | None = None
        self.entity_id: str | None = None
        self.text: str | None = None
        self.created_by: str | None = None
        self.created_at: datetime | None = None
        self.updated_by: str | None = None
        self.updated_at: datetime | None = None
        self.deleted_by: str | None = None
        self.deleted_at: datetime | None = None
        self.deletion_reason: str | None = None

    @classmethod
    def stream_prefix(cls) -> str:
        return "Comment"

    @property
    def exists(self) -> bool:
        return self.state is not CommentState.NON_EXISTENT

    @property
    def is_deleted(self) -> bool:
        return self.state is CommentState.DELETED

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_comment(
        self, entity_type: str, entity_id: str, text: str, user: str | None = None
    ) -> CommentAdded:
        if self.state is not CommentState.NON_EXISTENT:
            raise InvalidStateError(
                f"Comment '{self.id}' already exists",
                state=self.state.value,
                operation="add_comment",
            )
        event = CommentAdded(
            occurred_at=self._clock.now(),
            entity_type=entity_type,
            entity_id=entity_id,
            comment_id=self.id,
            text=text,
            user=user,
        )
        self._apply_change(event)
        return event

    def edit_comment(self, new_text: str, user: str | None = None) -> CommentEdited:
        self._require_active("edit_comment")
        assert self.entity_type is not None and self.entity_id is not None
        event = CommentEdited(
            occurred_at=self._clock.now(),
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            comment_id=self.id,
            text=new_text,
            previous_text=self.text,
            user=user,
        )
        self._apply_change(event)
        return event

    def delete_comment(self, reason: str | None = None, user: str | None = None) -> CommentDeleted:
        self._require_active("delete_comment")
        assert self.entity_type is not None and self.entity_id is not None
        event = CommentDeleted(
            occurred_at=self._clock.now(),
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            comment_id=self.id,
            reason=reason,
            user=user,
        )
        self._apply_change(event)
        return event

    def _require_active(self, operation: str) -> None:
        if self.state is CommentState.NON_EXISTENT:
            raise InvalidStateError(
                f"Comment '{self.id}' does not exist",
                state=self.state.value,
                operation=operation,
            )
        if self.state is CommentState.DELETED:
            raise InvalidStateError(
                f"Comment '{self.id}' has been deleted",
                state=self.state.value,
                operation=operation,
            )

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _apply(self, event: DomainEvent) -> None:
        match event:
            case CommentAdded():
                self.state = CommentState.ACTIVE
                self.entity_type = event.entity_type
                self.entity_id = event.entity_id
                self.text = event.text
                self.created_by = event.user
                self.created_at = event.occurred_at
            case CommentEdited():
                self.text = event.text
                self.updated_by = event.user
                self.updated_at = event.occurred_at
            case CommentDeleted():
                self.state = CommentState.DELETED
                self.deleted_by = event.user
                self.deleted_at = event.occurred_at
                self.deletion_reason = event.reason
            case _:
                pass


__all__ = ["CommentAggregate", "CommentState"]
