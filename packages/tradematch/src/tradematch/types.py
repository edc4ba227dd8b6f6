"""Core types for the tradematch service matching engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Position:
    position_number: str
    short_name_de: str
    short_name_en: str
    unit: str
    description_de: str
    description_en: str
    hero: bool = False


@dataclass(frozen=True)
class Trade:
    code: str
    name_de: str
    name_en: str
    positions: tuple[Position, ...] = ()


@dataclass(frozen=True)
class Catalogue:
    trades: tuple[Trade, ...] = ()


@dataclass(frozen=True)
class CatalogueItem:
    """A single position flattened out of its trade, ready for matching."""

    position: str
    short_name: str
    unit: str
    description: str
    category: str
    category_name: str
    tags: tuple[str, ...]
    hero: bool = False


@dataclass
class MatchQuery:
    description: str
    difficult_access: bool = False
    top_n: int | None = None
    flags: dict[str, bool] = field(default_factory=dict)

    def has_flag(self, name: str) -> bool:
        if name == "difficult_access":
            return self.difficult_access
        return bool(self.flags.get(name, False))


@dataclass
class MatchResult:
    position: str
    short_name: str
    unit: str
    score: float
    why: str
    matched_keywords: list[str] = field(default_factory=list)
    fuzzy_score: float = 0.0
    category_boost: bool = False

    def to_record(self) -> dict:
        """camelCase record used for JSON export and the HTTP API."""
        return {
            "position": self.position,
            "shortName": self.short_name,
            "unit": self.unit,
            "score": self.score,
            "why": self.why,
            "matchedKeywords": list(self.matched_keywords),
            "fuzzyScore": self.fuzzy_score,
            "categoryBoost": self.category_boost,
        }


@dataclass
class ScoredCandidate:
    position: str
    short_name: str
    unit: str
    score: float
    keyword_score: float
    fuzzy_score: float
    boost_score: float
    matched_keywords: list[str] = field(default_factory=list)
    category_boost: bool = False
    why: str = ""

    def to_result(self) -> MatchResult:
        return MatchResult(
            position=self.position,
            short_name=self.short_name,
            unit=self.unit,
            score=self.score,
            why=self.why,
            matched_keywords=list(self.matched_keywords),
            fuzzy_score=self.fuzzy_score,
            category_boost=self.category_boost,
        )
