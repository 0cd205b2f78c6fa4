"""
Canonical timestamp parsing and formatting for Camtrap DP tables.

**Conceptual**: Every date-time column in a Camtrap DP table (deploymentStart,
timestamp, eventStart, classificationTimestamp, ...) is an ISO 8601 string.
This module owns the single textual format the package reads and writes, so
the field codec never has to guess between ISO variants.

**Canonical format**:
  - Read:  "YYYY-MM-DDThh:mm:ss", optional fraction ".f" (1+ digits), optional
           timezone designator "Z" or "+hh:mm" / "-hh:mm".
  - Write: "YYYY-MM-DDThh:mm:ss", fraction only when microseconds are non-zero
           (6 digits), "Z" for a zero UTC offset, "+hh:mm" otherwise, nothing
           for naive values.

Writing then reading then writing again yields byte-identical text. Arbitrary
ISO variants that happen to parse (e.g. "+00:00", ".5") are normalised on
write, so stability is guaranteed for canonical text only.
"""

import re
from datetime import datetime, timedelta, timezone


ISO_TIMESTAMP_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?$"
)


def parse_timestamp(text: str) -> datetime:
    """
    Parse an ISO 8601 timestamp in the canonical Camtrap DP shape.

    Args:
        text: Raw cell text (already stripped by the caller).

    Returns:
        A `datetime`, timezone-aware when the text carries a designator.

    Raises:
        ValueError: If the text does not match the canonical shape or names an
                    impossible date/time (e.g. month 13, offset beyond 23:59).

    Example:
        >>> parse_timestamp("2020-05-21T20:00:00+02:00")
        datetime.datetime(2020, 5, 21, 20, 0, tzinfo=datetime.timezone(datetime.timedelta(seconds=7200)))
    """
    match = ISO_TIMESTAMP_PATTERN.match(text)
    if match is None:
        raise ValueError(
            f"'{text}' is not an ISO 8601 timestamp "
            f"(expected YYYY-MM-DDThh:mm:ss with optional Z or +hh:mm)"
        )

    # Fractions beyond microsecond precision are truncated
    fraction = match.group("fraction") or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0

    tzinfo = _parse_offset(match.group("tz"))

    # datetime() raises ValueError for out-of-range components
    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        int(match.group("second")),
        microsecond,
        tzinfo=tzinfo,
    )


def _parse_offset(designator: str | None) -> timezone | None:
    if designator is None:
        return None
    if designator == "Z":
        return timezone.utc

    sign = -1 if designator[0] == "-" else 1
    hours = int(designator[1:3])
    minutes = int(designator[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid UTC offset '{designator}'")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime in the canonical Camtrap DP shape.

    **Functionally**:
      - Date and time are always zero-padded ("0999-01-02T03:04:05").
      - Microseconds are written only when non-zero.
      - A zero UTC offset is written as "Z"; other offsets as "+hh:mm"/"-hh:mm".
      - Naive datetimes are written without a designator.

    Args:
        value: Datetime to format.

    Returns:
        Canonical ISO 8601 text.
    """
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += f".{value.microsecond:06d}"

    offset = value.utcoffset()
    if offset is None:
        return text
    if offset == timedelta(0):
        return text + "Z"

    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"
