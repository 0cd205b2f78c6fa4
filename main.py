"""
camtrap_dp – Main entry point.

Lists the Camtrap DP tables this package reads and writes.
"""

from camtrap_dp.data.schemas import SCHEMAS


def main() -> None:
    """Print each table with its required columns."""
    for schema in SCHEMAS.values():
        print(f"{schema.file_name:<18} required: {', '.join(schema.required_columns)}")


if __name__ == "__main__":
    main()
