"""
Named loaders and writers for the three Camtrap DP tables.

**Conceptual**: Thin wrappers around io.read_table / io.write_table that fix
the schema, so callers say "load the deployments" rather than passing
DEPLOYMENTS around:

    deployments = load_deployments("package/deployments.csv", ReadMode.STRICT).records

`load_tables(directory, mode)` reads all three tables of an unpacked package
by their conventional file names (deployments.csv, media.csv,
observations.csv). It does not read datapackage.json.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from camtrap_dp.data.errors import RowError
from camtrap_dp.data.io import ReadMode, ReadResult, read_table, write_table
from camtrap_dp.data.models import Deployment, Medium, Observation
from camtrap_dp.data.schemas import DEPLOYMENTS, MEDIA, OBSERVATIONS
from camtrap_dp.venues.sources import TableSink, TableSource


def load_deployments(source: TableSource, mode: ReadMode | str, **kwargs) -> ReadResult:
    """
    Read deployments.csv from a path, URL, bytes or file object.

    Extra keyword arguments (strict_columns, http_client) go to read_table.
    """
    return read_table(source, DEPLOYMENTS, mode, **kwargs)


def load_media(source: TableSource, mode: ReadMode | str, **kwargs) -> ReadResult:
    """Read media.csv from a path, URL, bytes or file object."""
    return read_table(source, MEDIA, mode, **kwargs)


def load_observations(source: TableSource, mode: ReadMode | str, **kwargs) -> ReadResult:
    """Read observations.csv from a path, URL, bytes or file object."""
    return read_table(source, OBSERVATIONS, mode, **kwargs)


def save_deployments(records: Iterable[Deployment], destination: Optional[TableSink] = None) -> str:
    return write_table(records, DEPLOYMENTS, destination)


def save_media(records: Iterable[Medium], destination: Optional[TableSink] = None) -> str:
    return write_table(records, MEDIA, destination)


def save_observations(records: Iterable[Observation], destination: Optional[TableSink] = None) -> str:
    return write_table(records, OBSERVATIONS, destination)


@dataclass
class CamtrapTables:
    """
    The three tables of one package, as read.

    Attributes:
        deployments / media / observations: Decoded records, in file order.
        errors: RowErrors per table name ("deployments", "media",
                "observations"); only tables with failures appear.
    """
    deployments: list[Deployment] = field(default_factory=list)
    media: list[Medium] = field(default_factory=list)
    observations: list[Observation] = field(default_factory=list)
    errors: dict[str, list[RowError]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def load_tables(directory: Path | str, mode: ReadMode | str, strict_columns: bool = False) -> CamtrapTables:
    """
    Read deployments.csv, media.csv and observations.csv from a directory.

    **Functionally**:
      - Each table is read with its own schema and the same mode.
      - STRICT raises on the first failing row of any table.
      - BEST_EFFORT collects RowErrors per table in `CamtrapTables.errors`.
      - No cross-table checks; see camtrap_dp.data.integrity for those.

    Args:
        directory: Directory holding the unpacked package tables.
        mode: ReadMode for all three tables.
        strict_columns: Reject columns the schemas do not define.

    Raises:
        FileNotFoundError: If a table file is missing.
        SchemaError / RowError / TableFormatError: As read_table.
    """
    directory = Path(directory)
    tables = CamtrapTables()

    for schema, attribute in (
        (DEPLOYMENTS, "deployments"),
        (MEDIA, "media"),
        (OBSERVATIONS, "observations"),
    ):
        result = read_table(directory / schema.file_name, schema, mode, strict_columns=strict_columns)
        setattr(tables, attribute, result.records)
        if result.errors:
            tables.errors[schema.name] = result.errors

    return tables
