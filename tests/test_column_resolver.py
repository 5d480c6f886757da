"""
Unit tests for the ColumnResolver.
"""

from __future__ import annotations

import pytest

from sheet_mapper.column_resolver import ColumnResolver
from sheet_mapper.config import MatchingConfig


@pytest.fixture
def resolver() -> ColumnResolver:
    return ColumnResolver(config=MatchingConfig(fuzzy_threshold=80.0))


HEADER = ["Nome", "Idade", None, "E-mail", "Data de Nascimento"]


class TestNormalizeLabel:
    def test_case_whitespace_punctuation(self, resolver: ColumnResolver) -> None:
        assert resolver.normalize_label("  Data   de_Nascimento: ") == "data de nascimento"

    def test_accents_kept(self, resolver: ColumnResolver) -> None:
        assert resolver.normalize_label("Não") == "não"

    def test_hyphen_kept(self, resolver: ColumnResolver) -> None:
        assert resolver.normalize_label("E–mail") == "e-mail"


class TestResolve:
    def test_exact(self, resolver: ColumnResolver) -> None:
        match = resolver.resolve(HEADER, " IDADE ")
        assert match is not None
        assert match.index == 1
        assert match.method == "exact"
        assert match.score == 100.0

    def test_fuzzy_typo(self, resolver: ColumnResolver) -> None:
        match = resolver.resolve(HEADER, "Idades")
        assert match is not None
        assert match.index == 1
        assert match.method == "fuzzy"
        assert match.score >= 80.0

    def test_word_order_insensitive(self, resolver: ColumnResolver) -> None:
        match = resolver.resolve(HEADER, "Nascimento Data de")
        assert match is not None
        assert match.index == 4

    def test_below_threshold(self, resolver: ColumnResolver) -> None:
        assert resolver.resolve(HEADER, "telefone") is None

    def test_empty_inputs(self, resolver: ColumnResolver) -> None:
        assert resolver.resolve(HEADER, "") is None
        assert resolver.resolve([None, "  "], "Nome") is None

    def test_ambiguous(self, resolver: ColumnResolver) -> None:
        match = resolver.resolve(["Total 2023", "Total 2024"], "Total 202")
        assert match is not None
        assert match.is_ambiguous


class TestResolveAll:
    def test_mixed(self, resolver: ColumnResolver) -> None:
        result = resolver.resolve_all(HEADER, {"name": "nome", "phone": "Telefone"})
        assert result["name"].index == 0
        assert result["phone"] is None

    def test_strict(self) -> None:
        strict = ColumnResolver(MatchingConfig(strict_mode=True))
        with pytest.raises(ValueError):
            strict.resolve_all(HEADER, {"phone": "Telefone"})
