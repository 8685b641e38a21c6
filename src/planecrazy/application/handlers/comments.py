"""Application handlers – comment commands."""
from __future__ import annotations

from uuid import uuid4

from planecrazy.application.handlers.base import EventSourcedCommandHandler
from planecrazy.domain.aggregates import CommentAggregate
from planecrazy.domain.commands import AddComment, DeleteComment, EditComment
from planecrazy.domain.validation import canonical_entity
from planecrazy.kernel.errors import InvalidStateError


class AddCommentHandler(EventSourcedCommandHandler[AddComment, CommentAggregate]):
    """Adds a comment under a freshly generated comment id."""

    def _create_aggregate(self, command: AddComment) -> CommentAggregate:
        return CommentAggregate(str(uuid4()), clock=self._clock)

    def _execute(self, aggregate: CommentAggregate, command: AddComment) -> None:
        entity_type, entity_id = canonical_entity(command.entity_type, command.entity_id)
        aggregate.add_comment(entity_type, entity_id, command.text, user=command.acting_user)

    def _entity(self, aggregate: CommentAggregate, command: AddComment) -> tuple[str, str]:
        return canonical_entity(command.entity_type, command.entity_id)


class _ExistingCommentHandler(
    EventSourcedCommandHandler[EditComment | DeleteComment, CommentAggregate]
):
    def _create_aggregate(self, command: EditComment | DeleteComment) -> CommentAggregate:
        return CommentAggregate(command.comment_id.strip(), clock=self._clock)

    def _entity(
        self, aggregate: CommentAggregate, command: EditComment | DeleteComment
    ) -> tuple[str, str]:
        return canonical_entity(command.entity_type, command.entity_id)

    @staticmethod
    def _check_target(
        aggregate: CommentAggregate, command: EditComment | DeleteComment, operation: str
    ) -> None:
        if not aggregate.exists:
            return
        if (aggregate.entity_type, aggregate.entity_id) != canonical_entity(
            command.entity_type, command.entity_id
        ):
            raise InvalidStateError(
                f"Comment '{aggregate.id}' belongs to "
                f"{aggregate.entity_type} '{aggregate.entity_id}'",
                state=aggregate.state.value,
                operation=operation,
            )


class EditCommentHandler(_ExistingCommentHandler):
    def _execute(self, aggregate: CommentAggregate, command: EditComment) -> None:
        self._check_target(aggregate, command, "edit_comment")
        aggregate.edit_comment(command.new_text, user=command.acting_user)


class DeleteCommentHandler(_ExistingCommentHandler):
    """Soft-deletes a comment; the projection keeps it for audit."""

    def _execute(self, aggregate: CommentAggregate, command: DeleteComment) -> None:
        self._check_target(aggregate, command, "delete_comment")
        aggregate.delete_comment(reason=command.reason, user=command.acting_user)


__all__ = ["AddCommentHandler", "DeleteCommentHandler", "EditCommentHandler"]
