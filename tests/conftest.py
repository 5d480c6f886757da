"""
Shared fixtures: real ``.xlsx`` workbooks written with openpyxl and a
legacy ``.xls`` workbook written with xlwt.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
import xlwt
from openpyxl import Workbook


@pytest.fixture
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing ``{sheet_title: rows}`` to an .xlsx file."""

    def _make(sheets: Dict[str, List[List[Any]]], name: str = "book.xlsx") -> Path:
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in sheets.items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _make


@pytest.fixture
def people_book(make_workbook: Callable[..., Path]) -> Path:
    return make_workbook({
        "People": [
            ["Name", "Age"],
            ["Ana", 30],
            ["", ""],
            ["Bo", "twenty-five"],
        ],
        "Notes": [
            ["Created", datetime(2024, 1, 15)],
        ],
    })


@pytest.fixture
def legacy_book(tmp_path: Path) -> Path:
    """Three-sheet BIFF workbook.

    People: header, Ana with a birth date, an unwritten row, Bo.
    Notes: one dated line.  Offset: header starts on the second row.
    """
    date_style = xlwt.easyxf(num_format_str="YYYY-MM-DD")
    wb = xlwt.Workbook()

    people = wb.add_sheet("People")
    for col, label in enumerate(["Name", "Age", "Born"]):
        people.write(0, col, label)
    people.write(1, 0, "Ana")
    people.write(1, 1, 30)
    people.write(1, 2, datetime(1994, 3, 2), date_style)
    people.write(3, 0, "Bo")
    people.write(3, 1, "twenty-five")

    notes = wb.add_sheet("Notes")
    notes.write(0, 0, "Created")
    notes.write(0, 1, datetime(2024, 1, 15), date_style)

    offset = wb.add_sheet("Offset")
    offset.write(1, 0, "Name")
    offset.write(1, 1, "Age")
    offset.write(2, 0, "Cy")
    offset.write(2, 1, 5)

    path = tmp_path / "legacy.xls"
    wb.save(str(path))
    return path
