"""
Row Mapping Contract.

A row mapper turns one data row into one domain object, or returns
``None`` to leave the row out of the results.  Any object with a
``map_row`` method qualifies, and so does a plain function.

``RecordMapper`` covers the common case declaratively: each field of the
target type is read from a fixed column with a fixed coercion.

Usage
-----
>>> mapper = RecordMapper(Product, {
...     "code": Column(0, "text", required=True),
...     "name": Column(1, "text"),
...     "price": Column(2, "double"),
... })
>>> products = TabularReader().read_all("products.xlsx", mapper)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
    Union,
    runtime_checkable,
)

from sheet_mapper.cells import Row
from sheet_mapper.coercer import CellValueCoercer
from sheet_mapper.column_resolver import ColumnResolver
from sheet_mapper.logging_setup import get_logger

logger = get_logger("row_mapper")

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

COLUMN_KINDS = ("text", "integer", "double", "boolean", "date")


@runtime_checkable
class RowMapper(Protocol[T_co]):
    """Strategy converting one non-blank row into a domain object."""

    def map_row(self, row: Row) -> Optional[T_co]:
        """Return the mapped object, or ``None`` to skip the row."""
        ...


class FunctionRowMapper(Generic[T]):
    """Adapts a plain ``Row -> T | None`` callable to ``RowMapper``."""

    def __init__(self, func: Callable[[Row], Optional[T]]) -> None:
        self._func = func

    def map_row(self, row: Row) -> Optional[T]:
        return self._func(row)

    def __repr__(self) -> str:
        name = getattr(self._func, "__name__", repr(self._func))
        return f"FunctionRowMapper({name})"


def as_row_mapper(
    mapper: Union[RowMapper[T], Callable[[Row], Optional[T]]],
) -> RowMapper[T]:
    """Normalise *mapper* to an object exposing ``map_row``.

    Raises
    ------
    TypeError
        If *mapper* is neither a ``RowMapper`` nor callable.
    """
    if isinstance(mapper, RowMapper):
        return mapper
    if callable(mapper):
        return FunctionRowMapper(mapper)
    raise TypeError(
        f"Expected a RowMapper or a callable, got {type(mapper).__name__}"
    )


# ---------------------------------------------------------------------------
# Declarative mapping
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Column:
    """Where a field lives and how its cell is coerced.

    ``index=None`` describes a column the sheet does not have; the field
    is then always ``None``.  A ``required`` field that coerces to ``None``
    makes ``RecordMapper`` skip the whole row.
    """

    index: Optional[int]
    kind: str = "text"
    required: bool = False

    def __post_init__(self) -> None:
        if self.kind not in COLUMN_KINDS:
            raise ValueError(
                f"Unknown column kind {self.kind!r}; expected one of {COLUMN_KINDS}"
            )


class RecordMapper(Generic[T]):
    """Build ``factory(**fields)`` from fixed columns.

    Parameters
    ----------
    factory:
        Callable accepting the field names as keyword arguments, typically
        a dataclass.
    columns:
        ``{field_name: Column}``.
    coercer:
        Coercer used for every field.  Defaults to ``CellValueCoercer()``.
    """

    def __init__(
        self,
        factory: Callable[..., T],
        columns: Mapping[str, Column],
        coercer: Optional[CellValueCoercer] = None,
    ) -> None:
        self._factory = factory
        self._columns: Dict[str, Column] = dict(columns)
        self._coercer = coercer or CellValueCoercer()
        self._extractors = {
            "text": self._coercer.as_text,
            "integer": self._coercer.as_integer,
            "double": self._coercer.as_double,
            "boolean": self._coercer.as_boolean,
            "date": self._coercer.as_date,
        }

    @property
    def columns(self) -> Dict[str, Column]:
        return dict(self._columns)

    def map_row(self, row: Row) -> Optional[T]:
        fields: Dict[str, Any] = {}
        for name, column in self._columns.items():
            if column.index is None:
                value = None
            else:
                value = self._extractors[column.kind](row.cell(column.index))
            if value is None and column.required:
                logger.debug(
                    "Row %d skipped: required field %r is empty", row.index, name
                )
                return None
            fields[name] = value
        return self._factory(**fields)

    @classmethod
    def from_header(
        cls,
        factory: Callable[..., T],
        header: Sequence[Optional[str]],
        fields: Mapping[str, Union[str, Tuple[str, str], Tuple[str, str, bool]]],
        resolver: Optional[ColumnResolver] = None,
        coercer: Optional[CellValueCoercer] = None,
    ) -> "RecordMapper[T]":
        """Build a mapper whose columns are found by header label.

        Parameters
        ----------
        header:
            Header row text, as returned by ``TabularReader.read_header``.
        fields:
            ``{field_name: label}`` or ``{field_name: (label, kind)}`` or
            ``{field_name: (label, kind, required)}``.
        resolver:
            Label matcher.  Defaults to ``ColumnResolver()``.
        """
        resolver = resolver or ColumnResolver()

        labels: Dict[str, str] = {}
        specs: Dict[str, Tuple[str, bool]] = {}
        for name, spec in fields.items():
            if isinstance(spec, str):
                label, kind, required = spec, "text", False
            elif len(spec) == 2:
                (label, kind), required = spec, False
            else:
                label, kind, required = spec
            labels[name] = label
            specs[name] = (kind, required)

        matches = resolver.resolve_all(header, labels)
        columns = {
            name: Column(
                matches[name].index if matches[name] is not None else None,
                kind,
                required,
            )
            for name, (kind, required) in specs.items()
        }
        return cls(factory, columns, coercer)
