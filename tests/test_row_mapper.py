"""
Unit tests for the row mapping contract and RecordMapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pytest

from sheet_mapper.cells import Cell, Row
from sheet_mapper.column_resolver import ColumnResolver
from sheet_mapper.config import MatchingConfig
from sheet_mapper.mappers import PersonRowMapper
from sheet_mapper.models import Person
from sheet_mapper.row_mapper import (
    Column,
    FunctionRowMapper,
    RecordMapper,
    RowMapper,
    as_row_mapper,
)


@dataclass
class Product:
    code: Optional[str]
    price: Optional[float]
    active: Optional[bool] = None
    launched: Optional[datetime] = None


def _row(*cells: Optional[Cell]) -> Row:
    return Row(1, {i: c for i, c in enumerate(cells) if c is not None})


# ======================================================================
# Contract
# ======================================================================

class TestAsRowMapper:
    def test_object_with_map_row_kept(self) -> None:
        mapper = PersonRowMapper()
        assert isinstance(mapper, RowMapper)
        assert as_row_mapper(mapper) is mapper

    def test_callable_wrapped(self) -> None:
        mapper = as_row_mapper(lambda row: len(row))
        assert isinstance(mapper, FunctionRowMapper)
        assert mapper.map_row(_row(Cell.text("a"), Cell.text("b"))) == 2

    def test_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError):
            as_row_mapper(42)


class TestPersonRowMapper:
    def test_maps_name_and_age(self) -> None:
        row = _row(Cell.text("Ana"), Cell.numeric(30.7))
        assert PersonRowMapper().map_row(row) == Person("Ana", 30)

    def test_missing_columns_are_none(self) -> None:
        row = _row(Cell.text("Solo"))
        assert PersonRowMapper().map_row(row) == Person("Solo", None)


# ======================================================================
# RecordMapper
# ======================================================================

class TestRecordMapper:
    def test_fixed_columns(self) -> None:
        mapper = RecordMapper(Product, {
            "code": Column(0),
            "price": Column(1, "double"),
            "active": Column(2, "boolean"),
            "launched": Column(3, "date"),
        })
        row = _row(
            Cell.numeric(1001),
            Cell.text("9.90"),
            Cell.text("sim"),
            Cell.numeric(45306, "yyyy-mm-dd", datetime(2024, 1, 15)),
        )
        assert mapper.map_row(row) == Product("1001", 9.9, True, datetime(2024, 1, 15))

    def test_required_field_skips_row(self) -> None:
        mapper = RecordMapper(Product, {
            "code": Column(0, required=True),
            "price": Column(1, "double"),
        })
        assert mapper.map_row(_row(None, Cell.numeric(3))) is None

    def test_column_without_index(self) -> None:
        mapper = RecordMapper(Product, {"code": Column(0), "price": Column(None, "double")})
        assert mapper.map_row(_row(Cell.text("X"), Cell.numeric(3))) == Product("X", None)

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            Column(0, "money")


class TestFromHeader:
    def test_resolves_by_label(self) -> None:
        mapper = RecordMapper.from_header(
            Product,
            ["Código", "Preço unitário", None],
            {"code": "codigo", "price": ("Preço Unitario", "double")},
            resolver=ColumnResolver(MatchingConfig(fuzzy_threshold=75.0)),
        )
        assert mapper.columns["price"] == Column(1, "double")
        assert mapper.columns["code"] == Column(0, "text")

    def test_unresolved_field_is_none(self) -> None:
        mapper = RecordMapper.from_header(
            Product,
            ["Code"],
            {"code": "Code", "price": ("Price", "double", False)},
        )
        assert mapper.columns["price"].index is None
        assert mapper.map_row(_row(Cell.text("A1"))) == Product("A1", None)

    def test_strict_mode_raises(self) -> None:
        with pytest.raises(ValueError, match="Strict mode"):
            RecordMapper.from_header(
                Product,
                ["Code"],
                {"code": "Code", "price": "Price"},
                resolver=ColumnResolver(MatchingConfig(strict_mode=True)),
            )
