"""Fuzzy similarity index over catalogue item text fields."""

from __future__ import annotations

from typing import Protocol, Sequence

import structlog
from rapidfuzz import fuzz, process

from tradematch.config import FuzzyConfig
from tradematch.errors import NoSimilarityIndexAvailable
from tradematch.normalize import normalize_text
from tradematch.types import CatalogueItem

log = structlog.get_logger()

INDEXED_FIELDS = ("short_name", "description", "category_name", "tags")


class SimilarityIndex(Protocol):
    """Approximate string matching over catalogue items.

    search() maps item position -> similarity in [0, 100]. Items below the
    index's threshold are absent rather than reported as 0.
    """

    def build(self, items: Sequence[CatalogueItem]) -> None: ...

    def search(self, query: str) -> dict[str, float]: ...


def _field_text(item: CatalogueItem, field_name: str) -> str:
    if field_name == "tags":
        return " ".join(item.tags)
    return normalize_text(getattr(item, field_name))


class FuzzyIndex:
    """rapidfuzz-backed index.

    Each field is scored with token_set_ratio, which ignores where in the
    field the query tokens occur and does not penalize long fields that
    contain all query tokens. An item keeps its best field score.
    """

    def __init__(self, config: FuzzyConfig | None = None) -> None:
        self.config = config or FuzzyConfig()
        self._fields: dict[str, dict[str, str]] | None = None

    @property
    def is_built(self) -> bool:
        return self._fields is not None

    def build(self, items: Sequence[CatalogueItem]) -> None:
        if not items:
            raise NoSimilarityIndexAvailable("cannot build a similarity index over an empty catalogue")

        fields: dict[str, dict[str, str]] = {name: {} for name in INDEXED_FIELDS}
        for item in items:
            for name in INDEXED_FIELDS:
                text = _field_text(item, name)
                if text:
                    fields[name][item.position] = text
        self._fields = fields
        log.debug("similarity_index_built", items=len(items), fields=len(INDEXED_FIELDS))

    def search(self, query: str) -> dict[str, float]:
        if self._fields is None:
            raise NoSimilarityIndexAvailable("similarity index has not been built")

        q = normalize_text(query)
        if not q:
            return {}

        scores: dict[str, float] = {}
        for name, choices in self._fields.items():
            if not choices:
                continue
            matches = process.extract(
                q,
                choices,
                scorer=fuzz.token_set_ratio,
                score_cutoff=self.config.min_similarity,
                limit=None,
            )
            for _text, score, position in matches:
                if score > scores.get(position, 0.0):
                    scores[position] = float(score)
        return scores
