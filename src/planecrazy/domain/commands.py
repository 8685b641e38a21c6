"""Domain – commands (validated intent to change state).

Commands are never persisted.  Each one exposes :meth:`Command.validate`,
which the command handler calls before any history is loaded; a failed
validation never produces an event.

Identifiers are compared case-insensitively: validation runs against the
normalized form (see :func:`~planecrazy.domain.validation.normalize_code`).
"""
from __future__ import annotations

import abc
import dataclasses
from datetime import UTC, datetime
from uuid import uuid4

from planecrazy.domain.validation import (
    AIRPORT_NAME_MAX_LENGTH,
    COMMENT_TEXT_MAX_LENGTH,
    REASON_MAX_LENGTH,
    TYPE_NAME_MAX_LENGTH,
    USER_NAME_MAX_LENGTH,
    ValidationResult,
    normalize_code,
    validate_airport_icao,
    validate_entity_id,
    validate_entity_type,
    validate_icao24,
    validate_registration,
    validate_text,
    validate_type_code,
)

__all__ = [
    "AddComment",
    "Command",
    "DeleteComment",
    "EditComment",
    "FavouriteAircraft",
    "FavouriteAircraftType",
    "FavouriteAirport",
    "UnfavouriteAircraft",
    "UnfavouriteAircraftType",
    "UnfavouriteAirport",
]


def _norm(value: str | None) -> str | None:
    return normalize_code(value) if value is not None else None


@dataclasses.dataclass(frozen=True, kw_only=True)
class Command(abc.ABC):
    """Base for every command.

    ``user`` names the acting user; when omitted, ``issued_by`` is used.
    """

    command_id: str = dataclasses.field(default_factory=lambda: str(uuid4()))
    created_at: datetime = dataclasses.field(default_factory=lambda: datetime.now(UTC))
    issued_by: str | None = None
    correlation_id: str | None = None
    user: str | None = None

    @property
    def acting_user(self) -> str | None:
        return self.user or self.issued_by

    @abc.abstractmethod
    def validate(self) -> ValidationResult: ...

    def _validate_user(self) -> ValidationResult:
        return validate_text(
            self.acting_user,
            field_name="User",
            max_length=USER_NAME_MAX_LENGTH,
            required=False,
        )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, kw_only=True)
class _CommentCommand(Command):
    entity_type: str
    entity_id: str

    def _validate_target(self) -> ValidationResult:
        return ValidationResult.merge(
            validate_entity_type(self.entity_type),
            validate_entity_id(self.entity_type, _norm(self.entity_id)),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class AddComment(_CommentCommand):
    text: str

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(
            self._validate_target(),
            validate_text(self.text, field_name="Comment text", max_length=COMMENT_TEXT_MAX_LENGTH),
            self._validate_user(),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class EditComment(_CommentCommand):
    comment_id: str
    new_text: str

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(
            _validate_comment_id(self.comment_id),
            self._validate_target(),
            validate_text(self.new_text, field_name="Comment text", max_length=COMMENT_TEXT_MAX_LENGTH),
            self._validate_user(),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class DeleteComment(_CommentCommand):
    comment_id: str
    reason: str | None = None

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(
            _validate_comment_id(self.comment_id),
            self._validate_target(),
            validate_text(
                self.reason,
                field_name="Deletion reason",
                max_length=REASON_MAX_LENGTH,
                required=False,
            ),
            self._validate_user(),
        )


def _validate_comment_id(comment_id: str | None) -> ValidationResult:
    if comment_id is None or not comment_id.strip():
        return ValidationResult.fail("CommentId cannot be empty")
    return ValidationResult.ok()


# ---------------------------------------------------------------------------
# Favourites
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, kw_only=True)
class FavouriteAircraft(Command):
    icao24: str
    registration: str | None = None
    type_code: str | None = None

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(
            validate_icao24(self.icao24),
            validate_registration(self.registration),
            validate_type_code(self.type_code),
            self._validate_user(),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class UnfavouriteAircraft(Command):
    icao24: str

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(validate_icao24(self.icao24), self._validate_user())


@dataclasses.dataclass(frozen=True, kw_only=True)
class FavouriteAircraftType(Command):
    type_code: str
    type_name: str | None = None

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(
            validate_type_code(self.type_code, required=True),
            validate_text(
                self.type_name,
                field_name="Type name",
                max_length=TYPE_NAME_MAX_LENGTH,
                required=False,
            ),
            self._validate_user(),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class UnfavouriteAircraftType(Command):
    type_code: str

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(
            validate_type_code(self.type_code, required=True),
            self._validate_user(),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class FavouriteAirport(Command):
    icao_code: str
    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    def validate(self) -> ValidationResult:
        errors: list[str] = []
        if self.latitude is not None and not -90.0 <= self.latitude <= 90.0:
            errors.append(f"Latitude must be between -90 and 90 (found {self.latitude})")
        if self.longitude is not None and not -180.0 <= self.longitude <= 180.0:
            errors.append(f"Longitude must be between -180 and 180 (found {self.longitude})")
        return ValidationResult.merge(
            validate_airport_icao(_norm(self.icao_code)),
            validate_text(
                self.name,
                field_name="Airport name",
                max_length=AIRPORT_NAME_MAX_LENGTH,
                required=False,
            ),
            ValidationResult.fail(*errors) if errors else ValidationResult.ok(),
            self._validate_user(),
        )


@dataclasses.dataclass(frozen=True, kw_only=True)
class UnfavouriteAirport(Command):
    icao_code: str

    def validate(self) -> ValidationResult:
        return ValidationResult.merge(
            validate_airport_icao(_norm(self.icao_code)),
            self._validate_user(),
        )
