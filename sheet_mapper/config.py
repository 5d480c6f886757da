"""
Configuration module for Sheet Mapper.

All tuneable parameters (header rows, boolean vocabularies, matching
thresholds, logging) live here.  Nothing is hard-coded in the reader or
the coercer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class CoercionConfig:
    """Controls how heterogeneous cell values are coerced."""

    # Text returned by ``as_text`` for error cells (``#DIV/0!``, ``#N/A`` ...)
    error_text: str = "ERRO"

    # Case-insensitive tokens recognised by ``as_boolean`` on text cells.
    true_tokens: FrozenSet[str] = frozenset({"true", "yes", "1", "sim"})
    false_tokens: FrozenSet[str] = frozenset({"false", "no", "0", "não"})


@dataclass(frozen=True)
class MatchingConfig:
    """Controls header label resolution."""

    # Fuzzy matching: minimum similarity score (0–100) to accept a match
    fuzzy_threshold: float = 80.0

    # If two header labels score within this delta of each other, the
    # match is flagged as ambiguous.
    fuzzy_ambiguity_delta: float = 5.0

    # When True an unresolved label raises instead of leaving the field empty.
    strict_mode: bool = False


@dataclass(frozen=True)
class ReaderConfig:
    """Top-level configuration aggregating all sub-configs."""

    # Rows skipped at the top of the sheet before data rows start
    header_row_count: int = 1

    # Zero-based sheet read when no index is passed explicitly
    sheet_index: int = 0

    coercion: CoercionConfig = field(default_factory=CoercionConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)

    log_level: int = logging.INFO

    # Optional file receiving the same log records as the console
    log_file: Optional[str] = None
