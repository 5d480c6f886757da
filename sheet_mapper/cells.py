"""
Spreadsheet data model.

Defines the provider-neutral cell and row structures that the document
backends produce and that the coercer and row mappers consume.  A cell's
kind is a closed set; a numeric cell may still represent an integer, a
float, or a date, which only its number format tells apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Cell kinds
# ---------------------------------------------------------------------------

class CellKind(str, Enum):
    """Discriminator of a cell's stored value."""

    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    FORMULA = "formula"
    BLANK = "blank"
    ERROR = "error"


class ResultKind(str, Enum):
    """Type of the cached result stored alongside a formula."""

    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    ERROR = "error"
    NONE = "none"


@dataclass(frozen=True)
class FormulaResult:
    """Cached result of a formula as last computed by the authoring app."""

    kind: ResultKind = ResultKind.NONE
    value: Any = None
    date_value: Optional[datetime] = None

    @classmethod
    def text(cls, value: str) -> "FormulaResult":
        return cls(ResultKind.TEXT, value)

    @classmethod
    def numeric(
        cls, value: float, date_value: Optional[datetime] = None
    ) -> "FormulaResult":
        return cls(ResultKind.NUMERIC, float(value), date_value)

    @classmethod
    def boolean(cls, value: bool) -> "FormulaResult":
        return cls(ResultKind.BOOLEAN, bool(value))

    @classmethod
    def error(cls, code: str) -> "FormulaResult":
        return cls(ResultKind.ERROR, code)


NO_RESULT = FormulaResult()


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Cell:
    """A single populated cell.

    ``value`` holds the payload matching ``kind``: ``str`` for text,
    ``float`` for numeric, ``bool`` for boolean, the Excel error code for
    error cells and ``None`` for blank and formula cells.
    """

    kind: CellKind
    value: Any = None
    number_format: str = "General"
    date_value: Optional[datetime] = None
    formula: Optional[str] = None
    cached: FormulaResult = NO_RESULT

    # -- constructors used by the backends and by tests ------------------

    @classmethod
    def text(cls, value: str) -> "Cell":
        return cls(CellKind.TEXT, value)

    @classmethod
    def numeric(
        cls,
        value: float,
        number_format: str = "General",
        date_value: Optional[datetime] = None,
    ) -> "Cell":
        return cls(CellKind.NUMERIC, float(value), number_format, date_value)

    @classmethod
    def boolean(cls, value: bool) -> "Cell":
        return cls(CellKind.BOOLEAN, bool(value))

    @classmethod
    def blank(cls) -> "Cell":
        return cls(CellKind.BLANK)

    @classmethod
    def error(cls, code: str) -> "Cell":
        return cls(CellKind.ERROR, code)

    @classmethod
    def formula_cell(
        cls, formula: Optional[str], cached: FormulaResult = NO_RESULT
    ) -> "Cell":
        return cls(CellKind.FORMULA, None, formula=formula, cached=cached)

    # -- typed accessors -------------------------------------------------

    @property
    def is_date_formatted(self) -> bool:
        return self.kind is CellKind.NUMERIC and self.date_value is not None

    @property
    def text_value(self) -> Optional[str]:
        return self.value if self.kind is CellKind.TEXT else None

    @property
    def numeric_value(self) -> Optional[float]:
        return self.value if self.kind is CellKind.NUMERIC else None

    @property
    def boolean_value(self) -> Optional[bool]:
        return self.value if self.kind is CellKind.BOOLEAN else None


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------

@dataclass
class Row:
    """One sheet row: a sparse, zero-based column → ``Cell`` map.

    ``index`` is the row's position in sheet iteration order.
    """

    index: int
    cells: Dict[int, Cell] = field(default_factory=dict)

    def cell(self, column: int) -> Optional[Cell]:
        """Return the cell at *column*, or ``None`` when absent."""
        return self.cells.get(column)

    @property
    def first_index(self) -> int:
        """First populated column, ``-1`` for a row without cells."""
        return min(self.cells) if self.cells else -1

    @property
    def last_index(self) -> int:
        """One past the last populated column, ``-1`` for a row without cells."""
        return max(self.cells) + 1 if self.cells else -1

    def __iter__(self) -> Iterator[Tuple[int, Cell]]:
        return iter(sorted(self.cells.items()))

    def __len__(self) -> int:
        return len(self.cells)

    def values(self) -> List[Any]:
        """Raw values from column 0 up to ``last_index``, ``None`` for gaps."""
        out: List[Any] = []
        for col in range(max(self.last_index, 0)):
            c = self.cells.get(col)
            if c is None:
                out.append(None)
            elif c.kind is CellKind.FORMULA:
                out.append(c.cached.value)
            else:
                out.append(c.value)
        return out
