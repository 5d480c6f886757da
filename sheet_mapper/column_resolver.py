"""
Header Column Resolution.

Finds the column that holds a field by matching the field's expected
label against the sheet's header row.  Headers drift between exports
("Nome", "Nome completo", "NOME "), so matching runs in two layers:

* **Exact**: normalised label equals a normalised header (confidence 100).
* **Fuzzy**: ``rapidfuzz`` ``token_sort_ratio`` over all header labels.
  Matches below ``fuzzy_threshold`` are rejected; if the runner-up is
  within ``fuzzy_ambiguity_delta`` the match is flagged as ambiguous and a
  warning is logged instead of silently picking one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from rapidfuzz import fuzz, process

from sheet_mapper.config import MatchingConfig
from sheet_mapper.logging_setup import get_logger

logger = get_logger("column_resolver")


@dataclass
class ColumnMatch:
    """A header column chosen for one label."""

    index: int
    header: str
    score: float  # 0–100
    method: str  # "exact" | "fuzzy"
    is_ambiguous: bool = False


class ColumnResolver:
    """Resolve expected labels to zero-based column indices.

    Parameters
    ----------
    config:
        Matching thresholds and the strict-mode flag.
    """

    # Characters to remove from labels (keep word characters, spaces, hyphens, "&")
    _PUNCT_RE = re.compile(r"[^\w\s\-&]")

    # Collapse whitespace and underscores
    _MULTI_SPACE_RE = re.compile(r"[\s_]+")

    def __init__(self, config: Optional[MatchingConfig] = None) -> None:
        self._config = config or MatchingConfig()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def normalize_label(self, raw: str) -> str:
        """Return the comparable form of a header label."""
        text = raw.strip().lower()
        text = text.replace("–", "-").replace("—", "-")
        text = self._PUNCT_RE.sub("", text)
        return self._MULTI_SPACE_RE.sub(" ", text).strip()

    def resolve(
        self, header: Sequence[Optional[str]], label: str
    ) -> Optional[ColumnMatch]:
        """Find the header column best matching *label*.

        Returns
        -------
        ColumnMatch | None
            Best match above threshold, or ``None`` if nothing qualifies.
        """
        target = self.normalize_label(label)
        if not target:
            return None

        choices: Dict[int, str] = {}
        for idx, text in enumerate(header):
            if text is None:
                continue
            norm = self.normalize_label(str(text))
            if norm:
                choices[idx] = norm

        if not choices:
            logger.debug("Header has no labels; %r unresolved", label)
            return None

        for idx, norm in choices.items():
            if norm == target:
                logger.debug("Exact header match: %r → column %d", label, idx)
                return ColumnMatch(idx, str(header[idx]), 100.0, "exact")

        # ``choices`` is a dict so results carry the column index as key
        results = process.extract(
            target,
            choices,
            scorer=fuzz.token_sort_ratio,
            limit=2,
        )
        if not results:
            return None

        _, best_score, best_idx = results[0]
        if best_score < self._config.fuzzy_threshold:
            logger.info(
                "Fuzzy best for %r is %r (%.1f): below threshold %.1f; rejected",
                label,
                header[best_idx],
                best_score,
                self._config.fuzzy_threshold,
            )
            return None

        is_ambiguous = False
        if len(results) > 1:
            _, second_score, second_idx = results[1]
            if best_score - second_score <= self._config.fuzzy_ambiguity_delta:
                is_ambiguous = True
                logger.warning(
                    "Ambiguous header match for %r: best=%r (%.1f), "
                    "runner-up=%r (%.1f)",
                    label,
                    header[best_idx],
                    best_score,
                    header[second_idx],
                    second_score,
                )

        logger.info(
            "Fuzzy header match: %r → %r column %d (score=%.1f)",
            label,
            header[best_idx],
            best_idx,
            best_score,
        )
        return ColumnMatch(
            best_idx, str(header[best_idx]), best_score, "fuzzy", is_ambiguous
        )

    def resolve_all(
        self,
        header: Sequence[Optional[str]],
        labels: Mapping[str, str],
    ) -> Dict[str, Optional[ColumnMatch]]:
        """Resolve ``{field: label}``.  Returns ``{field: match}``.

        Raises
        ------
        ValueError
            In strict mode, if any label cannot be resolved.
        """
        resolved = {name: self.resolve(header, label) for name, label in labels.items()}

        missing = [labels[name] for name, match in resolved.items() if match is None]
        if missing:
            if self._config.strict_mode:
                raise ValueError(
                    f"Strict mode: no header column for label(s) {missing}"
                )
            for label in missing:
                logger.warning("UNRESOLVED header label: %r", label)
        return resolved
