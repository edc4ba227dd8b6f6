"""Configuration for the tradematch service matching engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tradematch.types import CatalogueItem, MatchQuery

DEFAULT_CATALOGUE_PATH = Path(__file__).parent / "data" / "catalogue.json"

SCAFFOLDING_CATEGORY = "0300"


def catalogue_path() -> Path:
    """Catalogue location, overridable with TRADEMATCH_CATALOGUE."""
    return Path(os.environ.get("TRADEMATCH_CATALOGUE") or DEFAULT_CATALOGUE_PATH)


@dataclass
class ScoringWeights:
    keyword: float = 0.4
    fuzzy: float = 0.4
    category: float = 0.2


@dataclass
class FuzzyConfig:
    # 0-100, items scoring below are left out of the similarity map
    min_similarity: float = 40.0


@dataclass
class ExplanationConfig:
    max_keywords: int = 3
    high_similarity: float = 50.0
    partial_similarity: float = 20.0


@dataclass
class RankingConfig:
    top_n: int = 15


@dataclass
class CatalogueConfig:
    strict: bool = True


@dataclass(frozen=True)
class BoostRule:
    """Category boost triggered by a query flag.

    Applies when the item belongs to ``category`` and the query sets ``flag``.
    """

    category: str
    flag: str
    label: str
    score: float = 100.0

    def applies(self, item: CatalogueItem, query: MatchQuery) -> bool:
        return item.category == self.category and query.has_flag(self.flag)


def _default_boost_rules() -> list[BoostRule]:
    return [
        BoostRule(
            category=SCAFFOLDING_CATEGORY,
            flag="difficult_access",
            label="difficult access",
        )
    ]


@dataclass
class MatchConfig:
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    fuzzy: FuzzyConfig = field(default_factory=FuzzyConfig)
    explanation: ExplanationConfig = field(default_factory=ExplanationConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    catalogue: CatalogueConfig = field(default_factory=CatalogueConfig)
    boost_rules: list[BoostRule] = field(default_factory=_default_boost_rules)
