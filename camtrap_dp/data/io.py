"""
Table readers and writers with schema enforcement.

**Conceptual**: This module is the I/O boundary for Camtrap DP tables. Text
comes in from a source adapter (path, URL, bytes), is split into records of
raw strings, checked against a TableSchema header contract, and decoded row
by row into typed records. Writing goes through pandas `to_csv`.

**Reader states**: START -> HEADER_READ -> ROW_READ* -> DONE, with FAILED
entered when the header is rejected or, in strict mode, when a row fails.

**Read modes** (the caller always chooses one):
  - STRICT: the first RowError is raised; no records are returned.
  - BEST_EFFORT: every row is decoded; the ReadResult holds the valid records
    plus every RowError in row order.

A SchemaError (missing required column, repeated column) aborts the read in
both modes before any row is decoded. A data row whose cell count differs
from the header's is a RowError like any other bad row.

**Text format**: comma-delimited, double-quote quoting for cells containing
commas, quotes, carriage returns or newlines, UTF-8, "\\r\\n" line endings on
write (RFC 4180). Either line ending is accepted on read. Every cell is read
as text (no type inference, no NA conversion); typing is entirely the field
codec's job.
"""

import csv
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, TextIO

import pandas as pd

from camtrap_dp.data.errors import (
    ROW_COLUMN,
    FieldError,
    FieldErrorKind,
    RowError,
    SchemaError,
    SchemaErrorKind,
    TableFormatError,
)
from camtrap_dp.data.mapper import record_to_row, row_to_record
from camtrap_dp.data.schemas import TableSchema, validate_header
from camtrap_dp.utils.logging import get_logger
from camtrap_dp.venues.sources import (
    TableSink,
    TableSource,
    describe_source,
    open_source,
    write_sink,
)

logger = get_logger(__name__)


class ReadMode(str, Enum):
    STRICT = "strict"
    BEST_EFFORT = "best_effort"


class ReaderState(str, Enum):
    START = "start"
    HEADER_READ = "header_read"
    ROW_READ = "row_read"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ReadResult:
    """
    Outcome of reading one table.

    Attributes:
        records: Successfully decoded records, in input row order.
        errors: RowErrors in input row order (always empty in strict mode).
    """
    records: list = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every row decoded."""
        return not self.errors

    @property
    def failed_rows(self) -> list[int]:
        return [e.row_index for e in self.errors]

    def raise_for_errors(self) -> None:
        """Raise the first RowError, if any (turns a best-effort result strict)."""
        if self.errors:
            raise self.errors[0]


class TableReader:
    """
    Reads one table of a given schema from a character stream.

    A reader is single-use: `read()` moves it from START to DONE (or FAILED);
    `state` exposes where it stopped.

    Example:
        >>> reader = TableReader(DEPLOYMENTS, ReadMode.BEST_EFFORT)
        >>> result = reader.read(io.StringIO(text))
        >>> reader.state
        <ReaderState.DONE: 'done'>
    """

    def __init__(
        self,
        schema: TableSchema,
        mode: ReadMode | str,
        strict_columns: bool = False,
        context: Optional[str] = None,
    ):
        self.schema = schema
        self.mode = ReadMode(mode)
        self.strict_columns = strict_columns
        self.context = context or schema.file_name
        self.state = ReaderState.START
        self.rows_read = 0

    def read(self, stream: TextIO) -> ReadResult:
        """
        Read header and rows from a character stream.

        Raises:
            SchemaError: If the header lacks a required column, repeats a
                         column or, with strict_columns, has an unknown one.
            RowError: In STRICT mode, for the first row that fails.
            TableFormatError: If the text cannot be tokenized.
            RuntimeError: If the reader was already used.
        """
        if self.state is not ReaderState.START:
            raise RuntimeError(f"TableReader for {self.context} already used (state {self.state.value})")

        columns, rows = self._tokenize(stream)

        try:
            validate_header(columns, self.schema, self.strict_columns, context=self.context)
        except SchemaError:
            self.state = ReaderState.FAILED
            raise
        self.state = ReaderState.HEADER_READ
        logger.debug("%s: header accepted (%d columns)", self.context, len(columns))

        # Position of each schema column in the input, None when absent
        positions = [
            columns.index(name) if name in columns else None
            for name in self.schema.column_names
        ]

        result = ReadResult()
        for row_index, row in enumerate(rows, start=1):
            self.rows_read = row_index
            self.state = ReaderState.ROW_READ
            try:
                if len(row) != len(columns):
                    raise _cell_count_error(row_index, len(columns), len(row))
                cells = [row[pos] if pos is not None else "" for pos in positions]
                result.records.append(row_to_record(cells, self.schema, row_index))
            except RowError as e:
                if self.mode is ReadMode.STRICT:
                    self.state = ReaderState.FAILED
                    logger.error("%s: %s", self.context, e)
                    raise
                result.errors.append(e)

        self.state = ReaderState.DONE
        if result.errors:
            logger.warning(
                "%s: read %d records, %d rows failed (rows %s)",
                self.context,
                len(result.records),
                len(result.errors),
                result.failed_rows[:10],
            )
        else:
            logger.info("%s: read %d records", self.context, len(result.records))
        return result

    def _tokenize(self, stream: TextIO) -> tuple[list[str], list[list[str]]]:
        """
        Split the text into the header and the data rows, blank lines dropped.

        Rows keep their own cell count (no padding or truncation) so that a
        ragged row can be reported on its own instead of failing the table.
        """
        reader = csv.reader(stream, strict=True)
        try:
            records = [record for record in reader if record]
        except csv.Error as e:
            self.state = ReaderState.FAILED
            raise TableFormatError(
                f"{self.context}: cannot tokenize delimited text at line {reader.line_num}. Error: {e}"
            )

        if not records:
            self.state = ReaderState.FAILED
            raise SchemaError(
                SchemaErrorKind.MISSING_COLUMN,
                self.schema.required_columns,
                [],
                context=f"{self.context} (empty table, no header row)",
            )
        return records[0], records[1:]


def _cell_count_error(row_index: int, expected: int, found: int) -> RowError:
    return RowError(
        row_index,
        [
            FieldError(
                FieldErrorKind.CELL_COUNT_MISMATCH,
                ROW_COLUMN,
                None,
                f"expected {expected} cells (one per header column), found {found}",
                expected=expected,
                found=found,
            )
        ],
    )


def read_table(
    source: TableSource,
    schema: TableSchema,
    mode: ReadMode | str,
    strict_columns: bool = False,
    http_client=None,
) -> ReadResult:
    """
    Read a Camtrap DP table from a path, URL, bytes or file object.

    **Functionally**:
      - Opens the source through the source adapter (UTF-8 text).
      - Validates the header once (required columns present).
      - Decodes each data row with the record mapper.
      - STRICT raises the first RowError; BEST_EFFORT collects them.

    Args:
        source: Path, http(s) URL, bytes, or an open file object.
        schema: DEPLOYMENTS, MEDIA or OBSERVATIONS.
        mode: ReadMode.STRICT or ReadMode.BEST_EFFORT (or their string values).
        strict_columns: Reject columns the schema does not define.
        http_client: Optional CamtrapHttpClient for URL sources.

    Returns:
        ReadResult with records in row order and RowErrors keyed by row index.

    Raises:
        FileNotFoundError: If a local path does not exist.
        SourceError: If the source cannot be fetched or decoded.
        SchemaError: If the header is rejected.
        RowError: In STRICT mode, for the first failing row.
        TableFormatError: If the text cannot be tokenized.

    Example:
        >>> result = read_table("data/deployments.csv", DEPLOYMENTS, ReadMode.BEST_EFFORT)
        >>> len(result.records), result.failed_rows
        (4, [])
    """
    stream = open_source(source, http_client=http_client)
    reader = TableReader(schema, mode, strict_columns=strict_columns, context=describe_source(source))
    return reader.read(stream)


def write_table(
    records: Iterable,
    schema: TableSchema,
    destination: Optional[TableSink] = None,
) -> str:
    """
    Write records as a Camtrap DP table.

    **Functionally**:
      - Emits the header in schema column order.
      - Emits one row per record in the order given (never re-sorted).
      - Writes to `destination` when provided (path, binary or text buffer).

    Args:
        records: Records of the schema's record type.
        schema: DEPLOYMENTS, MEDIA or OBSERVATIONS.
        destination: Optional path or buffer to write to.

    Returns:
        The table text.

    Raises:
        TypeError: If a record is not of the schema's record type.
        ValueError: If a value would not read back unchanged (blank string,
                    empty list, list item containing "|", non-finite float).
        OSError: If the destination cannot be written.
    """
    rows = [record_to_row(record, schema) for record in records]
    frame = pd.DataFrame(rows, columns=schema.column_names, dtype=str)
    text = frame.to_csv(index=False, lineterminator="\r\n")

    if destination is not None:
        write_sink(text, destination)
        logger.info("Wrote %d %s rows to %s", len(rows), schema.name, describe_source(destination))
    return text
