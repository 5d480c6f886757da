"""
Row mappers for the bundled example models.

Expected sheet layout for ``PersonRowMapper``:

- Column A (index 0): name (text)
- Column B (index 1): age (integer)

A new model gets its own mapper: read each field with the coercer at its
column index and return the object.  ``RecordMapper`` does the same
declaratively.
"""

from __future__ import annotations

from typing import Optional

from sheet_mapper.cells import Row
from sheet_mapper.coercer import CellValueCoercer
from sheet_mapper.models import Person


class PersonRowMapper:
    """Map ``[name, age]`` rows to ``Person``."""

    NAME_COLUMN = 0
    AGE_COLUMN = 1

    def __init__(self, coercer: Optional[CellValueCoercer] = None) -> None:
        self._coercer = coercer or CellValueCoercer()

    def map_row(self, row: Row) -> Person:
        return Person(
            name=self._coercer.as_text(row.cell(self.NAME_COLUMN)),
            age=self._coercer.as_integer(row.cell(self.AGE_COLUMN)),
        )
