"""
Sheet Mapper: typed row extraction from spreadsheets.

Reads ``.xlsx`` and ``.xls`` workbooks and turns each data row into an
application object through a pluggable row mapper, skipping header and
blank rows.  Cell values are coerced null-safely: a bad or missing cell
becomes ``None`` on the mapped object instead of aborting the read.
"""

__version__ = "1.0.0"
__author__ = "Sheet Mapper Team"

from sheet_mapper.document import DocumentOpenError, open_document  # noqa: F401
from sheet_mapper.reader import TabularReader, is_row_empty  # noqa: F401
from sheet_mapper.row_mapper import Column, RecordMapper, RowMapper  # noqa: F401
