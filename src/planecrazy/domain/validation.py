"""Domain validation – field rules for command payloads.

Every validator returns a :class:`ValidationResult` rather than raising, so a
command can collect all of its field failures in one pass.  The limits here
mirror what the aviation data actually looks like:

* ICAO24 transponder address – 6 hexadecimal characters.
* Registration – up to 10 letters, digits and hyphens (``G-EUPT``).
* Aircraft type code – 2 to 10 alphanumerics (``A320``, ``B77W``).
* Airport code – 4 uppercase letters (ICAO) or 3 (IATA).
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

__all__ = [
    "AIRPORT_NAME_MAX_LENGTH",
    "COMMENT_TEXT_MAX_LENGTH",
    "EntityType",
    "REASON_MAX_LENGTH",
    "TYPE_NAME_MAX_LENGTH",
    "USER_NAME_MAX_LENGTH",
    "ValidationResult",
    "canonical_entity",
    "canonical_entity_type",
    "normalize_code",
    "validate_airport_code",
    "validate_airport_icao",
    "validate_airport_iata",
    "validate_entity_id",
    "validate_entity_type",
    "validate_icao24",
    "validate_registration",
    "validate_text",
    "validate_type_code",
]

COMMENT_TEXT_MAX_LENGTH = 5000
USER_NAME_MAX_LENGTH = 100
REASON_MAX_LENGTH = 500
TYPE_NAME_MAX_LENGTH = 200
AIRPORT_NAME_MAX_LENGTH = 200

_ICAO24_RE = re.compile(r"^[A-Fa-f0-9]{6}$")
_REGISTRATION_RE = re.compile(r"^[A-Za-z0-9-]{1,10}$")
_TYPE_CODE_RE = re.compile(r"^[A-Za-z0-9]{2,10}$")
_AIRPORT_ICAO_RE = re.compile(r"^[A-Z]{4}$")
_AIRPORT_IATA_RE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True, errors=())

    @classmethod
    def fail(cls, *errors: str) -> "ValidationResult":
        return cls(valid=False, errors=errors)

    @classmethod
    def merge(cls, *results: "ValidationResult") -> "ValidationResult":
        """Combine several results; invalid if any of them is."""
        errors = tuple(e for r in results for e in r.errors)
        if errors or not all(r.valid for r in results):
            return cls(valid=False, errors=errors)
        return cls.ok()

    @property
    def error_message(self) -> str | None:
        return "; ".join(self.errors) if self.errors else None


class EntityType(str, enum.Enum):
    """Kinds of entity that can be commented on or favourited."""

    AIRCRAFT = "Aircraft"
    TYPE = "Type"
    AIRPORT = "Airport"

    @classmethod
    def parse(cls, value: str) -> "EntityType":
        """Case-insensitive lookup; raises ``ValueError`` for unknown names."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown entity type {value!r}")


def normalize_code(value: str) -> str:
    """Canonical form for identifiers stored in events (upper-case, trimmed)."""
    return value.strip().upper()


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_icao24(value: str | None) -> ValidationResult:
    if _blank(value):
        return ValidationResult.fail("ICAO24 cannot be empty")
    assert value is not None
    if len(value) != 6:
        return ValidationResult.fail(f"ICAO24 must be exactly 6 characters (found {len(value)})")
    if not _ICAO24_RE.match(value):
        return ValidationResult.fail("ICAO24 must contain only hexadecimal characters (0-9, A-F)")
    return ValidationResult.ok()


def validate_registration(value: str | None) -> ValidationResult:
    """Registration is optional: blank values pass."""
    if _blank(value):
        return ValidationResult.ok()
    assert value is not None
    if len(value) > 10:
        return ValidationResult.fail(f"Registration cannot exceed 10 characters (found {len(value)})")
    if not _REGISTRATION_RE.match(value):
        return ValidationResult.fail("Registration must contain only alphanumeric characters and hyphens")
    return ValidationResult.ok()


def validate_type_code(value: str | None, *, required: bool = False) -> ValidationResult:
    if _blank(value):
        if required:
            return ValidationResult.fail("Type code cannot be empty")
        return ValidationResult.ok()
    assert value is not None
    if len(value) < 2:
        return ValidationResult.fail(f"Type code must be at least 2 characters (found {len(value)})")
    if len(value) > 10:
        return ValidationResult.fail(f"Type code cannot exceed 10 characters (found {len(value)})")
    if not _TYPE_CODE_RE.match(value):
        return ValidationResult.fail("Type code must contain only alphanumeric characters")
    return ValidationResult.ok()


def validate_airport_icao(value: str | None) -> ValidationResult:
    if _blank(value):
        return ValidationResult.fail("ICAO airport code cannot be empty")
    assert value is not None
    if len(value) != 4:
        return ValidationResult.fail(
            f"ICAO airport code must be exactly 4 characters (found {len(value)})"
        )
    if not _AIRPORT_ICAO_RE.match(value):
        return ValidationResult.fail("ICAO airport code must be 4 uppercase letters")
    return ValidationResult.ok()


def validate_airport_iata(value: str | None) -> ValidationResult:
    if _blank(value):
        return ValidationResult.fail("IATA airport code cannot be empty")
    assert value is not None
    if len(value) != 3:
        return ValidationResult.fail(
            f"IATA airport code must be exactly 3 characters (found {len(value)})"
        )
    if not _AIRPORT_IATA_RE.match(value):
        return ValidationResult.fail("IATA airport code must be 3 uppercase letters")
    return ValidationResult.ok()


def validate_airport_code(value: str | None) -> ValidationResult:
    """Accept either an ICAO (4 letters) or IATA (3 letters) airport code."""
    if _blank(value):
        return ValidationResult.fail("Airport code cannot be empty")
    assert value is not None
    if len(value) == 4:
        return validate_airport_icao(value)
    if len(value) == 3:
        return validate_airport_iata(value)
    return ValidationResult.fail(
        f"Airport code must be either 3 (IATA) or 4 (ICAO) letters (found {len(value)})"
    )


def validate_entity_type(value: str | None) -> ValidationResult:
    if _blank(value):
        return ValidationResult.fail("Entity type cannot be empty")
    assert value is not None
    try:
        EntityType.parse(value)
    except ValueError:
        names = ", ".join(m.value for m in EntityType)
        return ValidationResult.fail(f"Entity type must be one of: {names} (found '{value}')")
    return ValidationResult.ok()


def validate_entity_id(entity_type: str | None, entity_id: str | None) -> ValidationResult:
    """Check *entity_id* against the identifier format of *entity_type*."""
    if _blank(entity_id):
        return ValidationResult.fail("EntityId cannot be empty")
    try:
        kind = EntityType.parse(entity_type or "")
    except ValueError:
        # the entity type error is reported by validate_entity_type
        return ValidationResult.ok()
    if kind is EntityType.AIRCRAFT:
        result, label = validate_icao24(entity_id), "Aircraft ID (ICAO24)"
    elif kind is EntityType.TYPE:
        result, label = validate_type_code(entity_id, required=True), "Type ID (TypeCode)"
    else:
        result, label = validate_airport_icao(entity_id), "Airport ID (ICAO)"
    if result.valid:
        return result
    return ValidationResult.fail(f"Invalid {label}: {result.error_message}")


def validate_text(
    value: str | None,
    *,
    field_name: str,
    max_length: int,
    required: bool = True,
    min_length: int = 1,
) -> ValidationResult:
    if _blank(value):
        if required:
            return ValidationResult.fail(f"{field_name} cannot be empty")
        return ValidationResult.ok()
    assert value is not None
    if len(value) < min_length:
        return ValidationResult.fail(
            f"{field_name} must be at least {min_length} characters (found {len(value)})"
        )
    if len(value) > max_length:
        return ValidationResult.fail(
            f"{field_name} cannot exceed {max_length} characters (found {len(value)})"
        )
    return ValidationResult.ok()


def canonical_entity_type(entity_type: EntityType | str) -> str:
    """Canonical entity type name; unknown names pass through unchanged."""
    if isinstance(entity_type, EntityType):
        return entity_type.value
    try:
        return EntityType.parse(entity_type).value
    except ValueError:
        return entity_type


def canonical_entity(entity_type: EntityType | str, entity_id: str) -> tuple[str, str]:
    """Canonical ``(entity_type, entity_id)`` as stored in events."""
    return canonical_entity_type(entity_type), normalize_code(entity_id)
