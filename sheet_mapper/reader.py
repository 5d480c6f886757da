"""
Tabular Reader.

The central entry point that wires the document provider to a row mapper:

    Source  →  Document  →  Sheet  →  skip header rows  →  skip blank rows
            →  RowMapper  →  ordered list of domain objects

Usage
-----
>>> from sheet_mapper.reader import TabularReader
>>> from sheet_mapper.mappers import PersonRowMapper
>>>
>>> reader = TabularReader()
>>> people = reader.read_all("people.xlsx", PersonRowMapper())
"""

from __future__ import annotations

from itertools import islice
from typing import Callable, List, Mapping, Optional, Tuple, TypeVar, Union

from sheet_mapper.cells import CellKind, Row
from sheet_mapper.coercer import CellValueCoercer
from sheet_mapper.column_resolver import ColumnResolver
from sheet_mapper.config import ReaderConfig
from sheet_mapper.document import Source, open_document
from sheet_mapper.logging_setup import configure_logging, get_logger
from sheet_mapper.row_mapper import RecordMapper, RowMapper, as_row_mapper

logger = get_logger("reader")

T = TypeVar("T")

_CONTENT_KINDS = (CellKind.NUMERIC, CellKind.BOOLEAN, CellKind.FORMULA)


def is_row_empty(row: Optional[Row]) -> bool:
    """Return True if *row* carries nothing worth mapping.

    Whitespace-only text, blank and error cells are empty; any numeric,
    boolean or formula cell is content, zero included.
    """
    if row is None:
        return True

    for col in range(row.first_index, row.last_index):
        cell = row.cell(col)
        if cell is None:
            continue
        if cell.kind in _CONTENT_KINDS:
            return False
        if cell.kind is CellKind.TEXT and cell.value.strip():
            return False
    return True


class TabularReader:
    """Reads sheet rows into domain objects through a row mapper.

    Parameters
    ----------
    config:
        Default header row count and sheet index, coercion vocabularies,
        header matching thresholds and logging.
    """

    def __init__(self, config: Optional[ReaderConfig] = None) -> None:
        self._config = config or ReaderConfig()

        configure_logging(level=self._config.log_level, log_file=self._config.log_file)

        self._coercer = CellValueCoercer(self._config.coercion)
        self._resolver = ColumnResolver(self._config.matching)

    @property
    def config(self) -> ReaderConfig:
        return self._config

    @property
    def coercer(self) -> CellValueCoercer:
        return self._coercer

    @property
    def resolver(self) -> ColumnResolver:
        return self._resolver

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #

    def read_all(
        self,
        source: Source,
        mapper: Union[RowMapper[T], Callable[[Row], Optional[T]]],
        header_row_count: Optional[int] = None,
        sheet_index: Optional[int] = None,
    ) -> List[T]:
        """Map every non-blank data row of one sheet, in row order.

        Parameters
        ----------
        source:
            Path, binary stream or bytes of an ``.xlsx`` / ``.xls`` file.
        mapper:
            ``RowMapper`` or plain callable; returning ``None`` drops the row.
        header_row_count:
            Rows skipped before data starts.  Defaults to the config (1).
        sheet_index:
            Zero-based sheet.  Defaults to the config (0).

        Raises
        ------
        DocumentOpenError
            If the source cannot be opened as a workbook.
        IndexError
            If *sheet_index* is out of range.
        ValueError
            If *header_row_count* is negative.
        """
        if header_row_count is None:
            header_row_count = self._config.header_row_count
        if sheet_index is None:
            sheet_index = self._config.sheet_index
        if header_row_count < 0:
            raise ValueError(f"header_row_count must be >= 0, got {header_row_count}")

        row_mapper = as_row_mapper(mapper)
        result: List[T] = []

        with open_document(source) as document:
            sheet = document.sheet_at(sheet_index)

            logger.info(
                "Reading sheet: %s (%d rows including header)",
                sheet.name,
                sheet.row_count,
            )

            rows = sheet.iter_rows()
            # Running out of rows while skipping headers is not an error.
            for _ in islice(rows, header_row_count):
                pass

            blank = skipped = 0
            for row in rows:
                if is_row_empty(row):
                    blank += 1
                    logger.debug("Row %d is blank; skipped", row.index)
                    continue

                mapped = row_mapper.map_row(row)
                if mapped is None:
                    skipped += 1
                    logger.debug("Row %d skipped by mapper", row.index)
                    continue
                result.append(mapped)

        logger.info(
            "Read %d records from sheet '%s' (blank=%d, skipped=%d)",
            len(result),
            sheet.name,
            blank,
            skipped,
        )
        return result

    def read_header(
        self,
        source: Source,
        row_position: int = 0,
        sheet_index: Optional[int] = None,
    ) -> List[Optional[str]]:
        """Return the text of one row, typically the header, per column.

        *row_position* counts stored rows, the same way header rows are
        counted by ``read_all``.

        Columns run from 0 to the row's last populated cell; gaps are
        ``None``.  A sheet with fewer rows gives ``[]``.
        """
        if sheet_index is None:
            sheet_index = self._config.sheet_index
        if row_position < 0:
            raise ValueError(f"row_position must be >= 0, got {row_position}")

        with open_document(source) as document:
            sheet = document.sheet_at(sheet_index)
            row = next(islice(sheet.iter_rows(), row_position, None), None)

        if row is None:
            return []
        return [self._coercer.as_text(row.cell(col)) for col in range(max(row.last_index, 0))]

    def header_mapper(
        self,
        source: Source,
        factory: Callable[..., T],
        fields: Mapping[str, Union[str, Tuple[str, str], Tuple[str, str, bool]]],
        row_position: int = 0,
        sheet_index: Optional[int] = None,
    ) -> RecordMapper[T]:
        """Build a ``RecordMapper`` from the header row of *source*.

        Labels are resolved with this reader's matching settings, so a
        strict ``MatchingConfig`` makes an unresolved label a ``ValueError``.
        """
        header = self.read_header(source, row_position, sheet_index)
        return RecordMapper.from_header(
            factory, header, fields, resolver=self._resolver, coercer=self._coercer
        )

    # ------------------------------------------------------------------ #
    # Workbook introspection
    # ------------------------------------------------------------------ #

    def sheet_count(self, source: Source) -> int:
        """Number of worksheets in the workbook."""
        with open_document(source) as document:
            return document.sheet_count

    def sheet_names(self, source: Source) -> List[str]:
        """Worksheet names in sheet order."""
        with open_document(source) as document:
            return document.sheet_names
