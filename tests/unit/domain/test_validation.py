"""Unit tests for domain field validation."""

from __future__ import annotations

import pytest

from planecrazy.domain.validation import (
    EntityType,
    ValidationResult,
    canonical_entity,
    canonical_entity_type,
    normalize_code,
    validate_airport_code,
    validate_airport_iata,
    validate_airport_icao,
    validate_entity_id,
    validate_entity_type,
    validate_icao24,
    validate_registration,
    validate_text,
    validate_type_code,
)


class TestValidationResult:
    def test_ok(self) -> None:
        r = ValidationResult.ok()
        assert r.valid
        assert r.errors == ()
        assert r.error_message is None

    def test_fail_joins_messages(self) -> None:
        r = ValidationResult.fail("a", "b")
        assert not r.valid
        assert r.error_message == "a; b"

    def test_merge_collects_errors(self) -> None:
        merged = ValidationResult.merge(
            ValidationResult.ok(), ValidationResult.fail("x"), ValidationResult.fail("y")
        )
        assert not merged.valid
        assert merged.errors == ("x", "y")

    def test_merge_of_valid_results_is_valid(self) -> None:
        assert ValidationResult.merge(ValidationResult.ok(), ValidationResult.ok()).valid


class TestEntityType:
    @pytest.mark.parametrize("raw", ["Aircraft", "aircraft", " AIRCRAFT "])
    def test_parse_case_insensitive(self, raw: str) -> None:
        assert EntityType.parse(raw) is EntityType.AIRCRAFT

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError):
            EntityType.parse("Helicopter")


class TestIcao24:
    @pytest.mark.parametrize("value", ["A1B2C3", "abcdef", "000000"])
    def test_valid(self, value: str) -> None:
        assert validate_icao24(value).valid

    @pytest.mark.parametrize(
        ("value", "fragment"),
        [
            ("", "cannot be empty"),
            (None, "cannot be empty"),
            ("ABC", "exactly 6"),
            ("GHIJKL", "hexadecimal"),
        ],
    )
    def test_invalid(self, value: str | None, fragment: str) -> None:
        result = validate_icao24(value)
        assert not result.valid
        assert fragment in result.error_message


class TestRegistration:
    def test_blank_is_allowed(self) -> None:
        assert validate_registration(None).valid
        assert validate_registration("  ").valid

    def test_hyphenated(self) -> None:
        assert validate_registration("G-EUPT").valid

    def test_too_long(self) -> None:
        assert not validate_registration("ABCDEFGHIJK").valid

    def test_bad_characters(self) -> None:
        assert not validate_registration("G EUPT").valid


class TestTypeCode:
    def test_optional_by_default(self) -> None:
        assert validate_type_code(None).valid

    def test_required(self) -> None:
        assert not validate_type_code("", required=True).valid

    @pytest.mark.parametrize("value", ["A320", "B77W", "C172"])
    def test_valid(self, value: str) -> None:
        assert validate_type_code(value, required=True).valid

    @pytest.mark.parametrize("value", ["A", "ABCDEFGHIJK", "A-320"])
    def test_invalid(self, value: str) -> None:
        assert not validate_type_code(value).valid


class TestAirportCodes:
    def test_icao(self) -> None:
        assert validate_airport_icao("EGLL").valid
        assert not validate_airport_icao("egll").valid
        assert not validate_airport_icao("EGL").valid

    def test_iata(self) -> None:
        assert validate_airport_iata("LHR").valid
        assert not validate_airport_iata("LH1").valid

    def test_either(self) -> None:
        assert validate_airport_code("EGLL").valid
        assert validate_airport_code("LHR").valid
        result = validate_airport_code("EG")
        assert not result.valid
        assert "3 (IATA) or 4 (ICAO)" in result.error_message


class TestEntityValidation:
    def test_unknown_entity_type(self) -> None:
        result = validate_entity_type("Helicopter")
        assert not result.valid
        assert "Aircraft, Type, Airport" in result.error_message

    def test_entity_id_for_aircraft(self) -> None:
        assert validate_entity_id("Aircraft", "A1B2C3").valid
        result = validate_entity_id("Aircraft", "XYZ")
        assert not result.valid
        assert result.error_message.startswith("Invalid Aircraft ID (ICAO24)")

    def test_entity_id_for_type_and_airport(self) -> None:
        assert validate_entity_id("Type", "A320").valid
        assert validate_entity_id("Airport", "KJFK").valid
        assert not validate_entity_id("Airport", "JFK").valid

    def test_empty_entity_id(self) -> None:
        assert validate_entity_id("Aircraft", "").error_message == "EntityId cannot be empty"

    def test_unknown_type_defers_to_type_check(self) -> None:
        assert validate_entity_id("Helicopter", "anything").valid


class TestText:
    def test_required(self) -> None:
        result = validate_text("  ", field_name="Comment text", max_length=10)
        assert result.error_message == "Comment text cannot be empty"

    def test_optional(self) -> None:
        assert validate_text(None, field_name="Reason", max_length=10, required=False).valid

    def test_max_length(self) -> None:
        result = validate_text("x" * 11, field_name="Reason", max_length=10)
        assert "cannot exceed 10" in result.error_message

    def test_min_length(self) -> None:
        result = validate_text("ab", field_name="Name", max_length=10, min_length=3)
        assert "at least 3" in result.error_message


class TestNormalization:
    def test_normalize_code(self) -> None:
        assert normalize_code(" abcdef ") == "ABCDEF"

    def test_canonical_entity_type(self) -> None:
        assert canonical_entity_type("airport") == "Airport"
        assert canonical_entity_type(EntityType.TYPE) == "Type"
        assert canonical_entity_type("Helicopter") == "Helicopter"

    def test_canonical_entity(self) -> None:
        assert canonical_entity("aircraft", "a1b2c3") == ("Aircraft", "A1B2C3")
