"""
Spreadsheet Document Provider.

Opens a workbook from a path, a binary stream or raw bytes and exposes it
as provider-neutral ``Sheet`` / ``Row`` / ``Cell`` objects.  Two container
formats are supported, detected from the file signature rather than the
extension:

- Office Open XML (``.xlsx``, a ZIP archive) read with ``openpyxl``
- Legacy BIFF (``.xls``, an OLE2 compound file) read with ``xlrd``

Every failure to obtain a document (missing file, unreadable stream,
unknown signature, corrupt archive) surfaces as ``DocumentOpenError``.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, BinaryIO, Callable, Iterator, List, Optional, Union

import openpyxl
import xlrd
from openpyxl.utils.datetime import to_excel

from sheet_mapper.cells import Cell, FormulaResult, NO_RESULT, Row
from sheet_mapper.logging_setup import get_logger

logger = get_logger("document")

Source = Union[str, Path, bytes, BinaryIO]

_ZIP_MAGIC = b"PK\x03\x04"
_OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class DocumentOpenError(OSError):
    """The source is missing, unreadable, or not a recognised workbook."""


# ---------------------------------------------------------------------------
# Provider-neutral sheet and document
# ---------------------------------------------------------------------------

class Sheet:
    """A named worksheet whose rows are produced lazily, once."""

    def __init__(
        self,
        name: str,
        row_count: int,
        row_source: Callable[[], Iterator[Row]],
    ) -> None:
        self.name = name
        self.row_count = row_count
        self._row_source = row_source

    def iter_rows(self) -> Iterator[Row]:
        """Iterate the stored rows in order, header rows included.

        Rows holding no cell at all are not produced; ``Row.index`` keeps
        the zero-based sheet position, so gaps show in the indices.
        """
        return self._row_source()

    def __iter__(self) -> Iterator[Row]:
        return self.iter_rows()

    def __repr__(self) -> str:
        return f"Sheet(name={self.name!r}, row_count={self.row_count})"


class SpreadsheetDocument(ABC):
    """An open workbook.  Use as a context manager to guarantee release."""

    format_name: str = ""

    def __enter__(self) -> "SpreadsheetDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    @property
    @abstractmethod
    def sheet_count(self) -> int:
        """Number of worksheets."""

    @abstractmethod
    def _sheet_name(self, index: int) -> str: ...

    @abstractmethod
    def _load_sheet(self, index: int) -> Sheet: ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying workbook."""

    @property
    def sheet_names(self) -> List[str]:
        return [self._sheet_name(i) for i in range(self.sheet_count)]

    def sheet_name(self, index: int) -> str:
        self._check_index(index)
        return self._sheet_name(index)

    def sheet_at(self, index: int) -> Sheet:
        """Return the worksheet at zero-based *index*.

        Raises
        ------
        IndexError
            If *index* is negative or not below ``sheet_count``.
        """
        self._check_index(index)
        return self._load_sheet(index)

    def _check_index(self, index: int) -> None:
        count = self.sheet_count
        if not 0 <= index < count:
            raise IndexError(
                f"Sheet index ({index}) is out of range (0..{count - 1})"
            )


# ---------------------------------------------------------------------------
# openpyxl backend (.xlsx)
# ---------------------------------------------------------------------------

def _as_datetime(value: Any, serial: float, epoch: datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    # time-of-day and durations are anchored on the workbook epoch
    return epoch + timedelta(days=serial)


class _OpenpyxlDocument(SpreadsheetDocument):
    format_name = "xlsx"

    def __init__(self, data: bytes) -> None:
        # Formulas and their cached results live in two different views
        # of the same package.
        self._formulas = openpyxl.load_workbook(io.BytesIO(data), data_only=False)
        self._values = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
        self._epoch = getattr(self._values, "epoch", datetime(1899, 12, 30))

    @property
    def sheet_count(self) -> int:
        return len(self._formulas.worksheets)

    def _sheet_name(self, index: int) -> str:
        return self._formulas.worksheets[index].title

    def _load_sheet(self, index: int) -> Sheet:
        f_ws = self._formulas.worksheets[index]
        v_ws = self._values.worksheets[index]
        max_row, max_col = f_ws.max_row, f_ws.max_column

        def rows() -> Iterator[Row]:
            f_rows = f_ws.iter_rows(min_row=1, max_row=max_row, max_col=max_col)
            v_rows = v_ws.iter_rows(min_row=1, max_row=max_row, max_col=max_col)
            for position, (f_row, v_row) in enumerate(zip(f_rows, v_rows)):
                cells = {}
                for col, (f_cell, v_cell) in enumerate(zip(f_row, v_row)):
                    cell = self._convert(f_cell, v_cell)
                    if cell is not None:
                        cells[col] = cell
                # openpyxl pads the grid up to max_row; rows without any
                # stored cell are not part of the sheet
                if cells:
                    yield Row(index=position, cells=cells)

        return Sheet(f_ws.title, max_row, rows)

    def _convert(self, f_cell: Any, v_cell: Any) -> Optional[Cell]:
        if f_cell.data_type == "f":
            formula = getattr(f_cell.value, "text", f_cell.value)
            return Cell.formula_cell(
                str(formula) if formula is not None else None,
                self._cached_result(v_cell),
            )
        value = f_cell.value
        if value is None:
            return None

        dtype = f_cell.data_type
        fmt = f_cell.number_format
        if dtype == "s":
            return Cell.text(str(value))
        if dtype == "b":
            return Cell.boolean(value)
        if dtype == "e":
            return Cell.error(str(value))
        if dtype == "d":
            serial = to_excel(value, self._epoch)
            return Cell.numeric(serial, fmt, _as_datetime(value, serial, self._epoch))
        if dtype == "n":
            return Cell.numeric(value, fmt)

        logger.debug("Unhandled cell type %r at %s", dtype, f_cell.coordinate)
        return Cell.text(str(value))

    def _cached_result(self, v_cell: Any) -> FormulaResult:
        value = v_cell.value
        if value is None:
            return NO_RESULT
        dtype = v_cell.data_type
        if dtype == "b":
            return FormulaResult.boolean(value)
        if dtype == "e":
            return FormulaResult.error(str(value))
        if dtype == "d":
            serial = to_excel(value, self._epoch)
            return FormulaResult.numeric(
                serial, _as_datetime(value, serial, self._epoch)
            )
        if dtype == "n":
            return FormulaResult.numeric(value)
        return FormulaResult.text(str(value))

    def close(self) -> None:
        self._formulas.close()
        self._values.close()


# ---------------------------------------------------------------------------
# xlrd backend (.xls)
# ---------------------------------------------------------------------------

def convert_xlrd_cell(cell: Any, datemode: int) -> Optional[Cell]:
    """Translate one ``xlrd.sheet.Cell``; ``None`` for empty cells.

    xlrd only exposes cached formula results, so formulas arrive here as
    the kind of their last computed value.
    """
    ctype = cell.ctype
    if ctype == xlrd.XL_CELL_EMPTY:
        return None
    if ctype == xlrd.XL_CELL_TEXT:
        return Cell.text(cell.value)
    if ctype == xlrd.XL_CELL_NUMBER:
        return Cell.numeric(cell.value)
    if ctype == xlrd.XL_CELL_DATE:
        try:
            decoded = xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except xlrd.xldate.XLDateError:
            logger.debug("Serial %r is not a representable date", cell.value)
            return Cell.numeric(cell.value)
        return Cell.numeric(cell.value, "date", decoded)
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return Cell.boolean(bool(cell.value))
    if ctype == xlrd.XL_CELL_ERROR:
        return Cell.error(xlrd.error_text_from_code.get(cell.value, "#ERR"))
    if ctype == xlrd.XL_CELL_BLANK:
        return Cell.blank()
    logger.debug("Unhandled xlrd cell type %r", ctype)
    return None


class _XlrdDocument(SpreadsheetDocument):
    format_name = "xls"

    def __init__(self, data: bytes) -> None:
        self._book = xlrd.open_workbook(file_contents=data, ragged_rows=True)

    @property
    def sheet_count(self) -> int:
        return self._book.nsheets

    def _sheet_name(self, index: int) -> str:
        return self._book.sheet_names()[index]

    def _load_sheet(self, index: int) -> Sheet:
        sh = self._book.sheet_by_index(index)
        datemode = self._book.datemode

        def rows() -> Iterator[Row]:
            for rx in range(sh.nrows):
                if sh.row_len(rx) == 0:
                    continue
                cells = {}
                for col, raw in enumerate(sh.row(rx)):
                    cell = convert_xlrd_cell(raw, datemode)
                    if cell is not None:
                        cells[col] = cell
                yield Row(index=rx, cells=cells)

        return Sheet(sh.name, sh.nrows, rows)

    def close(self) -> None:
        self._book.release_resources()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _read_bytes(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, Path)):
        try:
            return Path(source).read_bytes()
        except OSError as exc:
            raise DocumentOpenError(f"Cannot read {source}: {exc}") from exc
    if hasattr(source, "read"):
        try:
            data = source.read()
        except OSError as exc:
            raise DocumentOpenError(f"Cannot read stream: {exc}") from exc
        if not isinstance(data, (bytes, bytearray)):
            raise DocumentOpenError("Stream must be opened in binary mode")
        return bytes(data)
    raise DocumentOpenError(f"Unsupported source type: {type(source).__name__}")


def open_document(source: Source) -> SpreadsheetDocument:
    """Open a workbook, auto-detecting ``.xlsx`` or ``.xls`` content.

    Raises
    ------
    DocumentOpenError
        If the source cannot be read or is not a recognised workbook.
    """
    data = _read_bytes(source)
    label = source if isinstance(source, (str, Path)) else "<stream>"

    if data.startswith(_ZIP_MAGIC):
        backend = _OpenpyxlDocument
    elif data.startswith(_OLE2_MAGIC):
        backend = _XlrdDocument
    else:
        raise DocumentOpenError(f"{label} is not a recognised spreadsheet document")

    try:
        doc = backend(data)
    except Exception as exc:  # noqa: BLE001
        raise DocumentOpenError(
            f"Cannot open {label} as {backend.format_name}: {exc}"
        ) from exc

    logger.debug("Opened %s (%s, %d sheets)", label, doc.format_name, doc.sheet_count)
    return doc
