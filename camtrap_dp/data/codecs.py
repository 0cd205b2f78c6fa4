"""
Field codec: one text cell <-> one typed value.

**Conceptual**: Camtrap DP defines a small, fixed set of field types, so the
codec is a closed table of decoders/encoders keyed by FieldKind rather than a
plugin system. A FieldSpec says which kind a column is, whether it may be
empty, and which constraints (bounds, vocabulary, pattern) its values obey.

**Functionally**:
  - decode_cell(raw, field) returns the typed value, or None for an empty cell
    in a nullable column. It raises FieldError on any failure.
  - encode_cell(value, field) returns the canonical text; None encodes as "".
    A value that would not decode back to itself (blank string, empty list,
    list item holding "|" or surrounding whitespace, nan/inf) raises
    ValueError instead of being written.

Decoding rules per kind:
  - STRING: pass-through (no trimming). Optional regex `pattern`. A cell
    holding only whitespace counts as empty, for every kind.
  - ENUM: trimmed text must equal one vocabulary literal (case-sensitive).
  - INTEGER: [+-]digits. FLOAT: decimal with optional fraction and exponent;
    nan/inf and values overflowing a float are rejected. Bounds are inclusive and checked after parsing.
  - BOOLEAN: true/True/TRUE/1 and false/False/FALSE/0.
  - DATETIME: canonical ISO 8601 (see camtrap_dp.utils.time).
  - LIST: pipe (|) separated strings -> tuple, blanks dropped.
  - JSON: a JSON object -> dict.
"""

import json
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Pattern

from camtrap_dp.data.errors import FieldError, FieldErrorKind
from camtrap_dp.utils.time import format_timestamp, parse_timestamp


class FieldKind(str, Enum):
    STRING = "string"
    ENUM = "enum"
    INTEGER = "integer"
    FLOAT = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    LIST = "list"
    JSON = "object"


@dataclass(frozen=True)
class FieldSpec:
    """
    Column specification for one field of a table schema.

    Attributes:
        name: Column name in the CSV header (e.g. "deploymentID").
        attribute: Record attribute the value is stored in (e.g. "deployment_id").
        kind: FieldKind selecting decoder/encoder.
        required: False makes the column nullable (empty cell -> None).
        minimum: Inclusive lower bound for INTEGER/FLOAT.
        maximum: Inclusive upper bound for INTEGER/FLOAT.
        enum: Enum class holding the vocabulary for ENUM columns.
        pattern: Compiled regex a STRING value must fully match.
    """
    name: str
    attribute: str
    kind: FieldKind
    required: bool = False
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    enum: Optional[type[Enum]] = None
    pattern: Optional[Pattern[str]] = None

    @property
    def allowed(self) -> tuple[str, ...]:
        """Vocabulary literals of an ENUM column, in declaration order."""
        if self.enum is None:
            return ()
        return tuple(member.value for member in self.enum)


INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
FLOAT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

TRUE_LITERALS = frozenset({"true", "True", "TRUE", "1"})
FALSE_LITERALS = frozenset({"false", "False", "FALSE", "0"})

LIST_SEPARATOR = "|"


# ============================================================================
# Decoding
# ============================================================================

def decode_cell(raw: Optional[str], field: FieldSpec) -> Any:
    """
    Decode one cell of text into the column's typed value.

    Args:
        raw: Cell text as read from the table (None is treated as "").
        field: Column specification.

    Returns:
        Typed value, or None for an empty cell in a nullable column.

    Raises:
        FieldError: MISSING_REQUIRED_VALUE for an empty required cell, or the
                    kind-specific failure (INVALID_ENUM, INVALID_NUMBER,
                    OUT_OF_RANGE, INVALID_BOOLEAN, INVALID_TIMESTAMP,
                    INVALID_PATTERN, INVALID_JSON).

    Example:
        >>> decode_cell("45.5", FieldSpec("latitude", "latitude", FieldKind.FLOAT, True, -90, 90))
        45.5
        >>> decode_cell("", FieldSpec("habitat", "habitat", FieldKind.STRING)) is None
        True
    """
    raw = "" if raw is None else raw
    text = raw if field.kind is FieldKind.STRING else raw.strip()

    if raw.strip() == "":
        if field.required:
            raise FieldError(
                FieldErrorKind.MISSING_REQUIRED_VALUE,
                field.name,
                raw,
                "required value is missing",
            )
        return None

    return _DECODERS[field.kind](text, field)


def _decode_string(text: str, field: FieldSpec) -> str:
    if field.pattern is not None and field.pattern.fullmatch(text) is None:
        raise FieldError(
            FieldErrorKind.INVALID_PATTERN,
            field.name,
            text,
            f"'{text}' does not match pattern {field.pattern.pattern}",
            pattern=field.pattern.pattern,
        )
    return text


def _decode_enum(text: str, field: FieldSpec) -> Enum:
    try:
        return field.enum(text)
    except ValueError:
        raise FieldError(
            FieldErrorKind.INVALID_ENUM,
            field.name,
            text,
            f"'{text}' is not one of {list(field.allowed)}",
            allowed=field.allowed,
        )


def _decode_integer(text: str, field: FieldSpec) -> int:
    if INTEGER_PATTERN.match(text) is None:
        raise FieldError(
            FieldErrorKind.INVALID_NUMBER,
            field.name,
            text,
            f"'{text}' is not an integer",
        )
    value = int(text)
    _check_range(value, text, field)
    return value


def _decode_float(text: str, field: FieldSpec) -> float:
    # Python's float() also accepts "nan", "inf" and "1_0"; the table format does not
    if FLOAT_PATTERN.match(text) is None:
        raise FieldError(
            FieldErrorKind.INVALID_NUMBER,
            field.name,
            text,
            f"'{text}' is not a decimal number",
        )
    value = float(text)
    if not math.isfinite(value):
        raise FieldError(
            FieldErrorKind.INVALID_NUMBER,
            field.name,
            text,
            f"'{text}' is outside the floating-point range",
        )
    _check_range(value, text, field)
    return value


def _check_range(value: float, text: str, field: FieldSpec) -> None:
    too_low = field.minimum is not None and value < field.minimum
    too_high = field.maximum is not None and value > field.maximum
    if too_low or too_high:
        raise FieldError(
            FieldErrorKind.OUT_OF_RANGE,
            field.name,
            text,
            f"{text} is outside [{_bound(field.minimum)}, {_bound(field.maximum)}]",
            minimum=field.minimum,
            maximum=field.maximum,
        )


def _bound(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:g}"


def _decode_boolean(text: str, field: FieldSpec) -> bool:
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    raise FieldError(
        FieldErrorKind.INVALID_BOOLEAN,
        field.name,
        text,
        f"'{text}' is not a boolean (expected true/false or 1/0)",
    )


def _decode_datetime(text: str, field: FieldSpec):
    try:
        return parse_timestamp(text)
    except ValueError as e:
        raise FieldError(
            FieldErrorKind.INVALID_TIMESTAMP,
            field.name,
            text,
            str(e),
        )


def _decode_list(text: str, field: FieldSpec) -> Optional[tuple[str, ...]]:
    items = tuple(item.strip() for item in text.split(LIST_SEPARATOR) if item.strip())
    if not items and field.required:
        raise FieldError(
            FieldErrorKind.MISSING_REQUIRED_VALUE,
            field.name,
            text,
            "required value is missing",
        )
    return items or None


def _decode_json(text: str, field: FieldSpec) -> dict:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise FieldError(
            FieldErrorKind.INVALID_JSON,
            field.name,
            text,
            f"not valid JSON ({e.msg})",
        )
    if not isinstance(value, dict):
        raise FieldError(
            FieldErrorKind.INVALID_JSON,
            field.name,
            text,
            f"expected a JSON object, got {type(value).__name__}",
        )
    return value


_DECODERS: dict[FieldKind, Callable[[str, FieldSpec], Any]] = {
    FieldKind.STRING: _decode_string,
    FieldKind.ENUM: _decode_enum,
    FieldKind.INTEGER: _decode_integer,
    FieldKind.FLOAT: _decode_float,
    FieldKind.BOOLEAN: _decode_boolean,
    FieldKind.DATETIME: _decode_datetime,
    FieldKind.LIST: _decode_list,
    FieldKind.JSON: _decode_json,
}


# ============================================================================
# Encoding
# ============================================================================

def encode_cell(value: Any, field: FieldSpec) -> str:
    """
    Encode a typed value as canonical cell text.

    None encodes as "" for every kind. Floats use the shortest text that reads
    back to the same float ("45.5", "1e-15"); timestamps use the canonical
    ISO 8601 shape; booleans are "true"/"false"; lists are pipe-joined; JSON
    objects are compact.

    Raises:
        ValueError: If the text would decode to something else: a blank
                    string or empty list (reads back as None), a list item
                    that is blank, contains "|" or has surrounding
                    whitespace, or a non-finite float.
    """
    if value is None:
        return ""
    problem = _unencodable(value, field.kind)
    if problem:
        raise ValueError(f"{field.name}: cannot write {value!r}, {problem}")
    return _ENCODERS[field.kind](value)


def _unencodable(value: Any, kind: FieldKind) -> Optional[str]:
    if kind is FieldKind.STRING and not str(value).strip():
        return "a blank cell reads back as missing"
    if kind is FieldKind.FLOAT and not math.isfinite(value):
        return "only finite numbers can be written"
    if kind is FieldKind.LIST:
        if not value:
            return "an empty list reads back as missing"
        for item in value:
            if LIST_SEPARATOR in item:
                return f"list items cannot contain '{LIST_SEPARATOR}'"
            if not item.strip() or item != item.strip():
                return "list items cannot be blank or padded with whitespace"
    return None


def _encode_enum(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


_ENCODERS: dict[FieldKind, Callable[[Any], str]] = {
    FieldKind.STRING: str,
    FieldKind.ENUM: _encode_enum,
    FieldKind.INTEGER: lambda value: str(int(value)),
    FieldKind.FLOAT: lambda value: repr(float(value)),
    FieldKind.BOOLEAN: lambda value: "true" if value else "false",
    FieldKind.DATETIME: format_timestamp,
    FieldKind.LIST: LIST_SEPARATOR.join,
    FieldKind.JSON: lambda value: json.dumps(value, ensure_ascii=False, separators=(",", ":")),
}
