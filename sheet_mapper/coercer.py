"""
Cell Value Coercion Layer.

Converts one heterogeneous spreadsheet cell into a requested semantic
type so that row mappers can ask for "the integer in column B" without
branching on how the cell happens to be stored.

Every conversion is a total function: a missing cell, a blank, a type
mismatch or unparseable text all yield ``None``.  Nothing here raises on
data.

Conversions
-----------
* ``as_text``   : any populated kind rendered as text
* ``as_integer``: numbers truncated toward zero, numeric text parsed
* ``as_double`` : numbers as-is, numeric text parsed
* ``as_boolean``: booleans, zero / non-zero numbers, yes/no vocabularies
* ``as_date``   : date-formatted numeric cells only
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Optional

from sheet_mapper.cells import Cell, CellKind, ResultKind
from sheet_mapper.config import CoercionConfig
from sheet_mapper.logging_setup import get_logger

logger = get_logger("coercer")


def format_number(value: float) -> str:
    """Render a number without a fractional part when it is integral."""
    if math.isfinite(value) and value == math.floor(value):
        return str(int(value))
    return repr(float(value))


# Plain ASCII decimal literals with an optional exponent and a trailing
# f/d type suffix.  Underscore separators and non-ASCII digits are text.
_NUMBER_RE = re.compile(
    r"(?P<number>[+-]?(?:NaN|Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))[fFdD]?",
    re.ASCII,
)


def _parse_float(text: str) -> Optional[float]:
    match = _NUMBER_RE.fullmatch(text.strip())
    if match is None:
        logger.debug("Cannot parse numeric value from: %r", text)
        return None
    return float(match.group("number"))


def _truncate(value: Optional[float]) -> Optional[int]:
    if value is None or not math.isfinite(value):
        return None
    return int(value)


class CellValueCoercer:
    """Stateless cell coercer.  All methods are pure functions.

    Parameters
    ----------
    config:
        Error sentinel and boolean vocabularies.  Defaults to
        ``CoercionConfig()``.
    """

    def __init__(self, config: Optional[CoercionConfig] = None) -> None:
        self._config = config or CoercionConfig()
        self._true = frozenset(t.lower() for t in self._config.true_tokens)
        self._false = frozenset(t.lower() for t in self._config.false_tokens)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def as_text(self, cell: Optional[Cell]) -> Optional[str]:
        """Return the cell's content as text.

        Text is returned verbatim, integral numbers without a fractional
        part, dates in ISO-8601 form and booleans as ``"true"``/``"false"``.
        Error cells give the configured sentinel (``"ERRO"``).
        """
        if cell is None:
            return None

        kind = cell.kind
        if kind is CellKind.TEXT:
            return cell.value
        if kind is CellKind.NUMERIC:
            if cell.date_value is not None:
                return cell.date_value.isoformat()
            return format_number(cell.value)
        if kind is CellKind.BOOLEAN:
            return "true" if cell.value else "false"
        if kind is CellKind.FORMULA:
            return self._cached_text(cell)
        if kind is CellKind.ERROR:
            return self._config.error_text
        return None

    def as_integer(self, cell: Optional[Cell]) -> Optional[int]:
        """Return the cell as an integer, truncating toward zero."""
        if cell is None:
            return None

        kind = cell.kind
        if kind is CellKind.NUMERIC:
            return _truncate(cell.value)
        if kind is CellKind.TEXT:
            return _truncate(_parse_float(cell.value))
        if kind is CellKind.FORMULA and cell.cached.kind is ResultKind.NUMERIC:
            return _truncate(cell.cached.value)
        return None

    def as_double(self, cell: Optional[Cell]) -> Optional[float]:
        """Return the cell as a float."""
        if cell is None:
            return None

        kind = cell.kind
        if kind is CellKind.NUMERIC:
            return cell.value
        if kind is CellKind.TEXT:
            return _parse_float(cell.value)
        if kind is CellKind.FORMULA and cell.cached.kind is ResultKind.NUMERIC:
            return cell.cached.value
        return None

    def as_boolean(self, cell: Optional[Cell]) -> Optional[bool]:
        """Return the cell as a boolean.

        Numbers are ``False`` only when zero.  Text is matched
        case-insensitively against the configured true / false tokens;
        anything else gives ``None``.
        """
        if cell is None:
            return None

        kind = cell.kind
        if kind is CellKind.BOOLEAN:
            return cell.value
        if kind is CellKind.NUMERIC:
            return cell.value != 0
        if kind is CellKind.TEXT:
            token = cell.value.strip().lower()
            if token in self._true:
                return True
            if token in self._false:
                return False
            logger.debug("Unrecognised boolean token: %r", cell.value)
        return None

    def as_date(self, cell: Optional[Cell]) -> Optional[datetime]:
        """Return the decoded date of a date-formatted numeric cell."""
        if cell is None or cell.kind is not CellKind.NUMERIC:
            return None
        return cell.date_value

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _cached_text(self, cell: Cell) -> Optional[str]:
        result = cell.cached
        if result.kind is ResultKind.TEXT:
            return result.value
        if result.kind is ResultKind.NUMERIC:
            if result.date_value is not None:
                return result.date_value.isoformat()
            return format_number(result.value)
        if result.kind is ResultKind.BOOLEAN:
            return "true" if result.value else "false"
        if result.kind is ResultKind.ERROR:
            return self._config.error_text
        return None


# ---------------------------------------------------------------------------
# Module-level shortcuts bound to the default configuration
# ---------------------------------------------------------------------------

_DEFAULT = CellValueCoercer()

as_text = _DEFAULT.as_text
as_integer = _DEFAULT.as_integer
as_double = _DEFAULT.as_double
as_boolean = _DEFAULT.as_boolean
as_date = _DEFAULT.as_date
