#!/usr/bin/env python3
"""
Validate a Camtrap DP table and report every problem row.

**Purpose**: Reads one table (deployments, media or observations) from a local
path or an http(s) URL, decodes every row against the Camtrap DP 1.0 schema
and prints a report: one line per failing row with the column, the offending
text and what is wrong with it.

**Usage**:
    From project root:
    ```bash
    python actions/validate_camtrap_table.py deployments data/deployments.csv
    python actions/validate_camtrap_table.py observations \\
        https://raw.githubusercontent.com/tdwg/camtrap-dp/1.0/example/observations.csv
    python actions/validate_camtrap_table.py media data/media.csv --strict
    python actions/validate_camtrap_table.py media data/media.csv --output clean/media.csv
    ```

**Options**:
  --strict          Stop at the first failing row (default mode comes from
                    CAMTRAP_READ_MODE, best_effort unless set).
  --strict-columns  Reject columns the schema does not define.
  --output PATH     Write the valid records back out in canonical form.

**Exit codes**: 0 all rows valid, 1 some rows failed, 2 the table could not
be read at all (missing file, bad header, network error).
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from camtrap_dp.config.settings import get_settings
from camtrap_dp.data.errors import CamtrapError, RowError
from camtrap_dp.data.io import ReadMode, read_table, write_table
from camtrap_dp.data.schemas import RecordKind, schema_for
from camtrap_dp.utils.logging import get_logger
from camtrap_dp.venues.http_client import CamtrapHttpClient

EXIT_OK = 0
EXIT_ROW_ERRORS = 1
EXIT_UNREADABLE = 2


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate a Camtrap DP table (deployments, media or observations)."
    )
    parser.add_argument(
        "kind",
        choices=[k.value for k in RecordKind],
        help="Which table the source holds.",
    )
    parser.add_argument("source", help="Local path or http(s) URL of the CSV table.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first failing row instead of reporting all of them.",
    )
    parser.add_argument(
        "--strict-columns",
        action="store_true",
        help="Reject columns the Camtrap DP schema does not define.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the valid records to this path in canonical form.",
    )
    return parser.parse_args(argv)


def format_row_error(error: RowError) -> list[str]:
    """One report line per field error of a row."""
    lines = []
    for field_error in error.field_errors:
        value = "" if field_error.value is None else f" {field_error.value!r}"
        lines.append(
            f"  row {error.row_index:>6}  {field_error.column:<28}{value}  {field_error.message}"
        )
    return lines


def main(argv=None) -> int:
    """
    Validate one table and print the report.

    Steps:
      1. Load settings (read mode default, column policy, HTTP timeout)
      2. Read the table through the matching schema
      3. Print failing rows and a summary
      4. Optionally write the valid records back out
    """
    args = parse_args(argv)
    settings = get_settings()
    logger = get_logger("camtrap_dp.actions.validate", level=settings.log_level)

    schema = schema_for(args.kind)
    mode = ReadMode.STRICT if args.strict else ReadMode(settings.read_mode)
    strict_columns = args.strict_columns or settings.strict_columns

    print("=" * 80)
    print(f"Camtrap DP {schema.name} table: {args.source}")
    print(f"Mode: {mode.value}   Unknown columns: {'rejected' if strict_columns else 'ignored'}")
    print("=" * 80)

    try:
        result = read_table(
            args.source,
            schema,
            mode,
            strict_columns=strict_columns,
            http_client=CamtrapHttpClient(settings.http),
        )
    except RowError as e:
        print("First failing row:")
        for line in format_row_error(e):
            print(line)
        return EXIT_ROW_ERRORS
    except (CamtrapError, FileNotFoundError) as e:
        logger.error("Cannot read %s: %s", args.source, e)
        print(f"✗ {e}")
        return EXIT_UNREADABLE

    if result.errors:
        print("Failing rows:")
        print("-" * 80)
        for error in result.errors:
            for line in format_row_error(error):
                print(line)
        print("-" * 80)

    print(f"Valid records: {len(result.records)}")
    print(f"Failing rows:  {len(result.errors)}")

    if args.output is not None:
        write_table(result.records, schema, args.output)
        print(f"Wrote {len(result.records)} records to {args.output}")

    return EXIT_OK if result.ok else EXIT_ROW_ERRORS


if __name__ == "__main__":
    sys.exit(main())
