"""
Bridge between typed records and pandas DataFrames.

**Conceptual**: Records are the validated representation; DataFrames are
what analysis code wants. This module converts between the two without a
second set of parsing rules: frames are turned back into records through the
same field codec and record mapper the CSV reader uses.

**Column dtypes produced by records_to_frame**:
  - DATETIME -> datetime64[ns, UTC] (offsets are normalised to UTC; naive
    values are taken as UTC)
  - INTEGER  -> nullable "Int64"
  - FLOAT    -> float64, NaN for absent values
  - BOOLEAN  -> nullable "boolean"
  - ENUM     -> categorical over the full vocabulary
  - STRING / LIST / JSON -> object (str, tuple, dict; None when absent)

Column names are the CSV column names, in schema order.
"""

from enum import Enum
from typing import Iterable

import numpy as np
import pandas as pd

from camtrap_dp.data.codecs import FieldKind, FieldSpec, encode_cell
from camtrap_dp.data.errors import RowError
from camtrap_dp.data.io import ReadMode, ReadResult
from camtrap_dp.data.mapper import row_to_record
from camtrap_dp.data.schemas import TableSchema, validate_header


def records_to_frame(records: Iterable, schema: TableSchema) -> pd.DataFrame:
    """
    Build a typed DataFrame with one row per record, in input order.

    Args:
        records: Records of the schema's record type.
        schema: Table schema of the records.

    Returns:
        DataFrame with the schema's columns and dtypes listed in the module docstring.

    Example:
        >>> frame = records_to_frame(deployments, DEPLOYMENTS)
        >>> frame["latitude"].dtype
        dtype('float64')
    """
    records = list(records)
    columns = {}
    for spec in schema.fields:
        values = [getattr(record, spec.attribute) for record in records]
        columns[spec.name] = _column(values, spec)
    return pd.DataFrame(columns, columns=schema.column_names)


def _column(values: list, spec: FieldSpec):
    if spec.kind is FieldKind.DATETIME:
        return pd.to_datetime(pd.Series(values, dtype=object), utc=True)
    if spec.kind is FieldKind.INTEGER:
        return pd.array(values, dtype="Int64")
    if spec.kind is FieldKind.FLOAT:
        return np.array([np.nan if v is None else v for v in values], dtype=np.float64)
    if spec.kind is FieldKind.BOOLEAN:
        return pd.array(values, dtype="boolean")
    if spec.kind is FieldKind.ENUM:
        return pd.Categorical(
            [None if v is None else v.value for v in values],
            categories=list(spec.allowed),
        )
    return pd.Series(values, dtype=object)


def frame_to_records(frame: pd.DataFrame, schema: TableSchema, mode: ReadMode | str) -> ReadResult:
    """
    Decode DataFrame rows into records with full validation.

    Cells may be typed (as produced by records_to_frame) or raw text (as from
    pd.read_csv(dtype=str)); raw strings go through the field codec as-is.
    Row indices in errors are 1-based frame positions.

    Args:
        frame: DataFrame whose columns are CSV column names.
        schema: Table schema of the rows.
        mode: STRICT raises the first RowError; BEST_EFFORT collects them.

    Raises:
        SchemaError: If a required column is missing.
        RowError: In STRICT mode, for the first failing row.
    """
    mode = ReadMode(mode)
    columns = [str(c) for c in frame.columns]
    validate_header(columns, schema, context="DataFrame")

    result = ReadResult()
    present = [spec for spec in schema.fields if spec.name in columns]
    for position, row in enumerate(frame[[spec.name for spec in present]].itertuples(index=False, name=None), start=1):
        by_name = {spec.name: _frame_cell_text(value, spec) for spec, value in zip(present, row)}
        try:
            result.records.append(row_to_record(by_name, schema, position))
        except RowError as e:
            if mode is ReadMode.STRICT:
                raise
            result.errors.append(e)
    return result


def _frame_cell_text(value, spec: FieldSpec) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (tuple, list)):
        return encode_cell(tuple(value), spec)
    if isinstance(value, dict):
        return encode_cell(value, spec)
    if value is None or pd.isna(value):
        return ""
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, Enum):
        return value.value
    if spec.kind is FieldKind.INTEGER and isinstance(value, float) and not value.is_integer():
        # Let the codec reject it instead of truncating
        return repr(value)
    return encode_cell(value, spec)
