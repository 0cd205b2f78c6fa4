"""
Record mapper: one table row <-> one typed record.

**Conceptual**: Applies a TableSchema column by column. Decoding never stops
at the first bad cell: every field of the row is decoded, and all failures
are reported together in a single RowError, so a row with a bad latitude and
a bad timestamp reports both.

Whole-record invariants (deploymentStart <= deploymentEnd, an observation
needs mediaID or deploymentID, ...) only run once every field decoded, since
they compare decoded values. Their failures are INVARIANT_VIOLATION field
errors in a RowError, never silently accepted.
"""

from typing import Mapping, Sequence

from camtrap_dp.data.codecs import decode_cell, encode_cell
from camtrap_dp.data.errors import FieldError, FieldErrorKind, RowError
from camtrap_dp.data.schemas import TableSchema


def row_from_mapping(row: Mapping[str, str], schema: TableSchema) -> list[str]:
    """
    Arrange a {column: text} mapping into schema column order.

    Columns missing from the mapping become "" (absent); keys the schema does
    not define are ignored.
    """
    return [row.get(name, "") for name in schema.column_names]


def row_to_record(
    cells: Sequence[str] | Mapping[str, str],
    schema: TableSchema,
    row_index: int = 1,
):
    """
    Decode one row of cell text into a record of the schema's type.

    Args:
        cells: Cell text aligned to `schema.fields`, or a {column: text} mapping.
        schema: Table schema of the row.
        row_index: 1-based data row position used to label errors.

    Returns:
        Record instance (Deployment, Medium or Observation).

    Raises:
        RowError: With every field error of the row, or with the invariant
                  violations when all fields decoded.
        ValueError: If a sequence of cells does not have one cell per column.

    Example:
        >>> row = ["obs1", "dep1", "", "", "", "", "event", "dinosaur"] + [""] * 20
        >>> row_to_record(row, OBSERVATIONS, row_index=3)
        Traceback (most recent call last):
        ...
        RowError: Row 3: observationType='dinosaur': 'dinosaur' is not one of [...]
    """
    if isinstance(cells, Mapping):
        cells = row_from_mapping(cells, schema)

    if len(cells) != len(schema.fields):
        raise ValueError(
            f"Row {row_index}: expected {len(schema.fields)} cells for {schema.name}, got {len(cells)}"
        )

    values = {}
    field_errors = []
    for spec, raw in zip(schema.fields, cells):
        try:
            values[spec.attribute] = decode_cell(raw, spec)
        except FieldError as e:
            field_errors.append(e)

    if field_errors:
        raise RowError(row_index, field_errors)

    record = schema.record_type(**values)

    violations = []
    for invariant in schema.invariants:
        problem = invariant.check(record)
        if problem is not None:
            violations.append(
                FieldError(FieldErrorKind.INVARIANT_VIOLATION, invariant.label, None, problem)
            )
    if violations:
        raise RowError(row_index, violations)

    return record


def record_to_row(record, schema: TableSchema) -> list[str]:
    """
    Encode a record as cell text in schema column order.

    Raises:
        TypeError: If the record is not of the schema's record type.
        ValueError: If a value would not read back unchanged (see encode_cell).
    """
    if not isinstance(record, schema.record_type):
        raise TypeError(
            f"{schema.name} rows are {schema.record_type.__name__} records, "
            f"got {type(record).__name__}"
        )
    return [encode_cell(getattr(record, spec.attribute), spec) for spec in schema.fields]
