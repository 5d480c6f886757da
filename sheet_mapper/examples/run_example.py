#!/usr/bin/env python3
"""
Example: read people from a workbook and print them as a table.

Run from the project root:
    python -m sheet_mapper.examples.run_example [path/to/file.xlsx]
or:
    python sheet_mapper/examples/run_example.py [path/to/file.xlsx]
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure the project root is on sys.path when run as a script
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from sheet_mapper.config import ReaderConfig
from sheet_mapper.document import DocumentOpenError
from sheet_mapper.mappers import PersonRowMapper
from sheet_mapper.reader import TabularReader

DEFAULT_PATH = "docs/exemplo.xlsx"


# ======================================================================
# Helper
# ======================================================================

def print_section(title: str) -> None:
    width = 48
    print("\n" + "=" * width)
    print(f"  {title}")
    print("=" * width)


def print_people(people) -> None:  # noqa: ANN001
    if not people:
        print("  No data found in the workbook.")
        return

    print(f"{'#':<5} | {'Name':<20} | {'Age':<10}")
    print("------+----------------------+------------")
    for i, person in enumerate(people, start=1):
        name = person.name if person.name is not None else "N/A"
        age = person.age if person.age is not None else "N/A"
        print(f"{i:<5} | {name:<20} | {age!s:<10}")
    print(f"\n  Total records: {len(people)}")


# ======================================================================
# Main
# ======================================================================

def main(argv: list[str]) -> int:
    path = argv[1] if len(argv) > 1 else DEFAULT_PATH

    reader = TabularReader(ReaderConfig(log_level=logging.WARNING))

    print_section("Spreadsheet Reader Demo")
    print(f"\n  Reading file: {path}")

    try:
        print(f"  Sheets: {', '.join(reader.sheet_names(path))}")
        people = reader.read_all(path, PersonRowMapper())
    except DocumentOpenError as exc:
        print(f"\n  Error reading workbook: {exc}", file=sys.stderr)
        print("\n  Possible causes:", file=sys.stderr)
        print("  - file not found at the given path", file=sys.stderr)
        print("  - file is locked by another application", file=sys.stderr)
        print("  - file is corrupt or not an Excel workbook", file=sys.stderr)
        return 1

    print_section("Extracted Data")
    print_people(people)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
