"""
Exception hierarchy for Camtrap DP table conversion.

**Conceptual**: Errors are layered the same way a table is:

  - FieldError: one cell failed to decode or validate (bad enum literal,
    non-numeric text, out-of-range value, bad timestamp, missing required
    value), a whole-record rule failed (invariant violation), or the row has
    the wrong number of cells.
  - RowError: every FieldError found in one data row, tagged with the row's
    1-based position (header excluded).
  - SchemaError: the header itself is unusable (a required column is
    missing or a column is repeated). Raised before any row is decoded.
  - SourceError: the collaborator that supplies or accepts the text failed
    (HTTP status, network). Opaque to the conversion layer.
  - TableFormatError: the delimited text cannot be tokenized at all.

FieldError never escapes the package on its own; the record mapper always
wraps it in a RowError.

**Usage**: Catch CamtrapError to handle anything raised by this package, or a
specific subclass for fine-grained handling.
"""

from enum import Enum
from typing import Any, Optional, Sequence


class CamtrapError(Exception):
    """Base exception for all camtrap_dp errors."""
    pass


class FieldErrorKind(str, Enum):
    """Closed set of single-cell (or whole-record) failure kinds."""
    INVALID_ENUM = "invalid_enum"
    INVALID_NUMBER = "invalid_number"
    OUT_OF_RANGE = "out_of_range"
    INVALID_BOOLEAN = "invalid_boolean"
    INVALID_TIMESTAMP = "invalid_timestamp"
    INVALID_PATTERN = "invalid_pattern"
    INVALID_JSON = "invalid_json"
    MISSING_REQUIRED_VALUE = "missing_required_value"
    INVARIANT_VIOLATION = "invariant_violation"
    CELL_COUNT_MISMATCH = "cell_count_mismatch"


# Column name used by FieldErrors that concern a whole row rather than one cell
ROW_COLUMN = "*"


class FieldError(CamtrapError):
    """
    A single cell (or record invariant) that failed validation.

    Attributes:
        kind: FieldErrorKind describing the failure.
        column: Column name the failure refers to. For invariant violations,
                the columns involved joined with "/"; ROW_COLUMN for a row
                with the wrong number of cells.
        value: Offending raw text ("" for missing values, None for invariants).
        message: Human-readable description.
        details: Extra context, e.g. {"allowed": (...)} for enums or
                 {"minimum": 0, "maximum": 1} for ranges.
    """

    def __init__(
        self,
        kind: FieldErrorKind,
        column: str,
        value: Optional[str],
        message: str,
        **details: Any,
    ):
        self.kind = kind
        self.column = column
        self.value = value
        self.message = message
        self.details = details
        super().__init__(f"{column}: {message}")

    def __eq__(self, other):
        if not isinstance(other, FieldError):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.column == other.column
            and self.value == other.value
            and self.details == other.details
        )

    def __hash__(self):
        return hash((self.kind, self.column, self.value))

    def __repr__(self):
        return f"FieldError({self.kind.name}, column={self.column!r}, value={self.value!r})"


class RowError(CamtrapError):
    """
    Every field error found in one data row.

    Attributes:
        row_index: 1-based position of the data row (the header is not counted).
        field_errors: FieldErrors in schema column order, invariant violations last.
    """

    def __init__(self, row_index: int, field_errors: Sequence[FieldError]):
        self.row_index = row_index
        self.field_errors = list(field_errors)
        problems = "; ".join(
            f"{e.column}={e.value!r}: {e.message}" if e.value is not None else f"{e.column}: {e.message}"
            for e in self.field_errors
        )
        super().__init__(f"Row {row_index}: {problems}")

    @property
    def columns(self) -> list[str]:
        """Column names referenced by the field errors, in order."""
        return [e.column for e in self.field_errors]


class SchemaErrorKind(str, Enum):
    MISSING_COLUMN = "missing_column"
    UNEXPECTED_COLUMN = "unexpected_column"
    DUPLICATE_COLUMN = "duplicate_column"


class SchemaError(CamtrapError):
    """
    Raised when a table header does not satisfy a table schema.

    Attributes:
        kind: MISSING_COLUMN, UNEXPECTED_COLUMN or DUPLICATE_COLUMN.
        columns: The missing, unexpected or repeated column names.
        found: Column names actually present in the header.
    """

    def __init__(
        self,
        kind: SchemaErrorKind,
        columns: Sequence[str],
        found: Sequence[str],
        context: Optional[str] = None,
    ):
        self.kind = kind
        self.columns = list(columns)
        self.found = list(found)
        ctx = f"{context}: " if context else ""
        if kind is SchemaErrorKind.MISSING_COLUMN:
            message = f"{ctx}Missing required columns: {self.columns}. Found columns: {self.found}."
        elif kind is SchemaErrorKind.DUPLICATE_COLUMN:
            message = f"{ctx}Duplicate columns: {self.columns}. Found columns: {self.found}."
        else:
            message = f"{ctx}Unexpected columns: {self.columns}. Found columns: {self.found}."
        super().__init__(message)


class SourceError(CamtrapError):
    """
    Raised when a table source or sink fails (HTTP error, network failure).

    Attributes:
        source: Description of the source (URL, path).
        status_code: HTTP status code when the failure was an HTTP response.
    """

    def __init__(self, message: str, source: Optional[str] = None, status_code: Optional[int] = None):
        self.source = source
        self.status_code = status_code
        super().__init__(message)


class TableFormatError(CamtrapError):
    """Raised when delimited text cannot be tokenized into rows."""
    pass
