"""
Tests for camtrap_dp/utils/time.py

These tests pin down the one timestamp shape the tables are read and written in.
"""

from datetime import datetime, timedelta, timezone

import pytest

from camtrap_dp.utils.time import format_timestamp, parse_timestamp


# ============================================================================
# Parsing
# ============================================================================

def test_parse_timestamp_with_offset():
    """Test that a +hh:mm designator becomes a fixed-offset tzinfo."""
    value = parse_timestamp("2020-05-21T20:00:00+02:00")

    assert value == datetime(2020, 5, 21, 18, 0, tzinfo=timezone.utc)
    assert value.utcoffset() == timedelta(hours=2)


def test_parse_timestamp_zulu_is_utc():
    value = parse_timestamp("2021-03-15T11:23:00Z")
    assert value.tzinfo == timezone.utc
    assert value.hour == 11


def test_parse_timestamp_without_designator_is_naive():
    value = parse_timestamp("2021-01-10T08:00:00")
    assert value.tzinfo is None
    assert value == datetime(2021, 1, 10, 8, 0, 0)


def test_parse_timestamp_negative_offset():
    value = parse_timestamp("2019-11-02T06:15:00-05:30")
    assert value.utcoffset() == -timedelta(hours=5, minutes=30)


def test_parse_timestamp_fraction_is_truncated_to_microseconds():
    """Test that digits beyond microsecond precision are dropped, not rounded."""
    assert parse_timestamp("2020-01-01T00:00:00.5Z").microsecond == 500000
    assert parse_timestamp("2020-01-01T00:00:00.1234567Z").microsecond == 123456


@pytest.mark.parametrize("text", [
    "not-a-date",
    "2020-05-21",
    "2020-05-21 20:00:00",
    "2020-05-21T20:00",
    "2020-05-21T20:00:00+0200",
    "21/05/2020T20:00:00",
    "2020-05-21T20:00:00ZZ",
])
def test_parse_timestamp_rejects_other_shapes(text):
    with pytest.raises(ValueError) as exc_info:
        parse_timestamp(text)
    assert "ISO 8601" in str(exc_info.value)


@pytest.mark.parametrize("text", [
    "2020-13-01T00:00:00",
    "2021-02-29T00:00:00",
    "2020-01-01T24:00:00",
    "2020-01-01T00:00:00+24:00",
    "2020-01-01T00:00:00+01:60",
])
def test_parse_timestamp_rejects_impossible_values(text):
    """Test that well-shaped text naming an impossible instant still fails."""
    with pytest.raises(ValueError):
        parse_timestamp(text)


# ============================================================================
# Formatting
# ============================================================================

def test_format_timestamp_utc_uses_z():
    value = datetime(2021, 3, 15, 11, 23, tzinfo=timezone.utc)
    assert format_timestamp(value) == "2021-03-15T11:23:00Z"


def test_format_timestamp_keeps_offset():
    value = datetime(2020, 5, 21, 20, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(value) == "2020-05-21T20:00:00+02:00"

    value = datetime(2019, 11, 2, 6, 15, tzinfo=timezone(-timedelta(hours=5, minutes=30)))
    assert format_timestamp(value) == "2019-11-02T06:15:00-05:30"


def test_format_timestamp_naive_has_no_designator():
    assert format_timestamp(datetime(2021, 1, 10, 8, 0)) == "2021-01-10T08:00:00"


def test_format_timestamp_zero_pads_every_component():
    assert format_timestamp(datetime(999, 1, 2, 3, 4, 5)) == "0999-01-02T03:04:05"


def test_format_timestamp_writes_microseconds_only_when_present():
    assert format_timestamp(datetime(2021, 1, 12, 6, 30, 15, 250000)) == "2021-01-12T06:30:15.250000"
    assert format_timestamp(datetime(2021, 1, 12, 6, 30, 15)) == "2021-01-12T06:30:15"


@pytest.mark.parametrize("text", [
    "2020-05-21T20:00:00+02:00",
    "2021-03-15T11:23:00Z",
    "2021-01-12T06:30:15.250000",
    "1999-12-31T23:59:59.000001-09:30",
])
def test_canonical_text_is_stable(text):
    """Test that format(parse(text)) gives back canonical text unchanged."""
    assert format_timestamp(parse_timestamp(text)) == text


def test_non_canonical_variants_are_normalised():
    assert format_timestamp(parse_timestamp("2021-03-15T11:23:00+00:00")) == "2021-03-15T11:23:00Z"
    assert format_timestamp(parse_timestamp("2021-03-15T11:23:00.5")) == "2021-03-15T11:23:00.500000"
