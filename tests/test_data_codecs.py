"""
Tests for the field codec (camtrap_dp/data/codecs.py).

This module tests:
  - Decoding per field kind, including the empty-cell rules.
  - Constraint failures (bounds, vocabularies, patterns) and their error kinds.
  - Canonical encoding of typed values.
"""

import re
from datetime import datetime, timezone

import pytest

from camtrap_dp.data.codecs import FieldKind, FieldSpec, decode_cell, encode_cell
from camtrap_dp.data.errors import FieldError, FieldErrorKind
from camtrap_dp.data.models import ObservationType


# ============================================================================
# Helper specs
# ============================================================================

LATITUDE = FieldSpec("latitude", "latitude", FieldKind.FLOAT, required=True, minimum=-90, maximum=90)
COUNT = FieldSpec("count", "count", FieldKind.INTEGER, minimum=1)
HABITAT = FieldSpec("habitat", "habitat", FieldKind.STRING)
OBSERVATION_TYPE = FieldSpec(
    "observationType", "observation_type", FieldKind.ENUM, required=True, enum=ObservationType
)
BAIT_USE = FieldSpec("baitUse", "bait_use", FieldKind.BOOLEAN)
START = FieldSpec("deploymentStart", "deployment_start", FieldKind.DATETIME, required=True)
TAGS = FieldSpec("deploymentTags", "deployment_tags", FieldKind.LIST)
EXIF = FieldSpec("exifData", "exif_data", FieldKind.JSON)
MEDIATYPE = FieldSpec(
    "fileMediatype", "file_mediatype", FieldKind.STRING, required=True,
    pattern=re.compile(r"^(image|video|audio)/.*$"),
)


def decode_error(raw, spec) -> FieldError:
    with pytest.raises(FieldError) as exc_info:
        decode_cell(raw, spec)
    return exc_info.value


# ============================================================================
# Empty cells
# ============================================================================

def test_empty_required_cell_is_missing_value():
    """Test that an empty cell in a required column fails, whatever the kind."""
    for spec in (LATITUDE, OBSERVATION_TYPE, START, MEDIATYPE):
        error = decode_error("", spec)
        assert error.kind is FieldErrorKind.MISSING_REQUIRED_VALUE
        assert error.column == spec.name


def test_empty_nullable_cell_is_none():
    for spec in (COUNT, HABITAT, BAIT_USE, TAGS, EXIF):
        assert decode_cell("", spec) is None


def test_none_is_treated_as_empty():
    assert decode_cell(None, HABITAT) is None
    assert decode_error(None, LATITUDE).kind is FieldErrorKind.MISSING_REQUIRED_VALUE


def test_whitespace_only_cell_is_empty_for_typed_columns():
    assert decode_cell("   ", COUNT) is None
    assert decode_error("  ", LATITUDE).kind is FieldErrorKind.MISSING_REQUIRED_VALUE


def test_whitespace_only_string_is_empty():
    """Test that a blank required string is missing and a blank optional one is None."""
    required = FieldSpec("deploymentID", "deployment_id", FieldKind.STRING, required=True)

    error = decode_error("   ", required)
    assert error.kind is FieldErrorKind.MISSING_REQUIRED_VALUE
    assert error.value == "   "
    assert decode_cell(" \t ", HABITAT) is None


# ============================================================================
# Strings and patterns
# ============================================================================

def test_string_is_passed_through_untrimmed():
    assert decode_cell("  riparian forest ", HABITAT) == "  riparian forest "


def test_pattern_must_match_whole_value():
    assert decode_cell("image/jpeg", MEDIATYPE) == "image/jpeg"

    error = decode_error("application/pdf", MEDIATYPE)
    assert error.kind is FieldErrorKind.INVALID_PATTERN
    assert error.value == "application/pdf"


# ============================================================================
# Enumerations
# ============================================================================

def test_enum_decodes_to_member():
    assert decode_cell("animal", OBSERVATION_TYPE) is ObservationType.ANIMAL


def test_enum_rejects_unknown_literal():
    error = decode_error("dinosaur", OBSERVATION_TYPE)

    assert error.kind is FieldErrorKind.INVALID_ENUM
    assert error.column == "observationType"
    assert error.value == "dinosaur"
    assert "animal" in error.details["allowed"]


def test_enum_is_case_sensitive():
    assert decode_error("Animal", OBSERVATION_TYPE).kind is FieldErrorKind.INVALID_ENUM


def test_enum_cell_is_trimmed():
    assert decode_cell(" blank ", OBSERVATION_TYPE) is ObservationType.BLANK


# ============================================================================
# Numbers
# ============================================================================

def test_float_decodes_and_trims():
    assert decode_cell(" 45.5 ", LATITUDE) == 45.5
    assert decode_cell("-90", LATITUDE) == -90.0
    assert decode_cell("1e1", LATITUDE) == 10.0


@pytest.mark.parametrize("raw", ["abc", "nan", "inf", "-Infinity", "1_0", "4,5", "45.5.1"])
def test_float_rejects_non_decimal_text(raw):
    error = decode_error(raw, LATITUDE)
    assert error.kind is FieldErrorKind.INVALID_NUMBER


@pytest.mark.parametrize("raw", ["1e999", "-1e999", "1" + "0" * 400])
def test_float_rejects_values_beyond_float_range(raw):
    error = decode_error(raw, FieldSpec("cameraHeight", "camera_height", FieldKind.FLOAT))
    assert error.kind is FieldErrorKind.INVALID_NUMBER
    assert error.value == raw


def test_float_bounds_are_inclusive():
    assert decode_cell("90", LATITUDE) == 90.0

    error = decode_error("200.0", LATITUDE)
    assert error.kind is FieldErrorKind.OUT_OF_RANGE
    assert error.value == "200.0"
    assert error.details == {"minimum": -90, "maximum": 90}


def test_integer_decodes_signed_digits():
    assert decode_cell("3", COUNT) == 3
    assert decode_cell("+12", COUNT) == 12


def test_integer_rejects_fraction():
    assert decode_error("1.5", COUNT).kind is FieldErrorKind.INVALID_NUMBER


def test_integer_minimum():
    error = decode_error("0", COUNT)
    assert error.kind is FieldErrorKind.OUT_OF_RANGE
    assert error.details["minimum"] == 1
    assert error.details["maximum"] is None


# ============================================================================
# Booleans, timestamps, lists, JSON
# ============================================================================

@pytest.mark.parametrize("raw,expected", [
    ("true", True), ("True", True), ("TRUE", True), ("1", True),
    ("false", False), ("False", False), ("FALSE", False), ("0", False),
])
def test_boolean_literals(raw, expected):
    assert decode_cell(raw, BAIT_USE) is expected


def test_boolean_rejects_other_text():
    assert decode_error("yes", BAIT_USE).kind is FieldErrorKind.INVALID_BOOLEAN


def test_datetime_decodes_canonical_text():
    assert decode_cell("2021-03-15T11:23:00Z", START) == datetime(2021, 3, 15, 11, 23, tzinfo=timezone.utc)


def test_datetime_rejects_bad_text():
    error = decode_error("not-a-date", START)
    assert error.kind is FieldErrorKind.INVALID_TIMESTAMP
    assert error.column == "deploymentStart"


def test_list_splits_on_pipe_and_drops_blanks():
    assert decode_cell("season:spring| area:val ||", TAGS) == ("season:spring", "area:val")
    assert decode_cell("|", TAGS) is None


def test_json_decodes_object():
    assert decode_cell('{"ISO":400,"Flash":"off"}', EXIF) == {"ISO": 400, "Flash": "off"}


@pytest.mark.parametrize("raw", ["{bad", "[1, 2]", '"text"'])
def test_json_rejects_non_objects(raw):
    assert decode_error(raw, EXIF).kind is FieldErrorKind.INVALID_JSON


# ============================================================================
# Encoding
# ============================================================================

def test_encode_none_is_empty_for_every_kind():
    for spec in (LATITUDE, COUNT, HABITAT, OBSERVATION_TYPE, BAIT_USE, START, TAGS, EXIF):
        assert encode_cell(None, spec) == ""


def test_encode_canonical_forms():
    assert encode_cell(45.5, LATITUDE) == "45.5"
    assert encode_cell(1e-15, LATITUDE) == "1e-15"
    assert encode_cell(3, COUNT) == "3"
    assert encode_cell(True, BAIT_USE) == "true"
    assert encode_cell(False, BAIT_USE) == "false"
    assert encode_cell(ObservationType.HUMAN, OBSERVATION_TYPE) == "human"
    assert encode_cell(datetime(2021, 3, 15, 11, 23, tzinfo=timezone.utc), START) == "2021-03-15T11:23:00Z"
    assert encode_cell(("a", "b"), TAGS) == "a|b"
    assert encode_cell({"ISO": 400, "Model": "HC500"}, EXIF) == '{"ISO":400,"Model":"HC500"}'


def test_encoded_values_decode_to_the_same_value():
    for value, spec in (
        (-0.1, LATITUDE),
        (89.999999, LATITUDE),
        (7, COUNT),
        (ObservationType.VEHICLE, OBSERVATION_TYPE),
        (("foraging", "walking"), TAGS),
        ({"nested": {"a": [1, 2]}, "é": "ü"}, EXIF),
    ):
        assert decode_cell(encode_cell(value, spec), spec) == value


@pytest.mark.parametrize(
    "value, spec",
    [
        ("", HABITAT),
        ("   ", HABITAT),
        ((), TAGS),
        (("a|b",), TAGS),
        (("a", " b"), TAGS),
        (("a", ""), TAGS),
        (float("inf"), LATITUDE),
        (float("nan"), LATITUDE),
    ],
)
def test_encode_rejects_values_that_would_not_read_back(value, spec):
    with pytest.raises(ValueError) as exc_info:
        encode_cell(value, spec)
    assert spec.name in str(exc_info.value)


# ============================================================================
# FieldError
# ============================================================================

def test_field_error_equality_ignores_message():
    a = FieldError(FieldErrorKind.INVALID_ENUM, "sex", "x", "first wording")
    b = FieldError(FieldErrorKind.INVALID_ENUM, "sex", "x", "second wording")
    c = FieldError(FieldErrorKind.INVALID_ENUM, "sex", "y", "first wording")

    assert a == b
    assert a != c
