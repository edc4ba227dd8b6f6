"""Deterministic scoring of catalogue items against an intake.

SCORING FORMULA:
    score = W_keyword * keyword_score + W_fuzzy * fuzzy_score + W_category * boost_score

- keyword_score: matched intake tokens / total intake tokens * 100
- fuzzy_score: similarity from the fuzzy index, 0-100 (0 when absent)
- boost_score: highest score of the boost rules that apply, else 0
"""

from __future__ import annotations

import math
from typing import Sequence

from tradematch.config import BoostRule, ExplanationConfig, MatchConfig
from tradematch.normalize import searchable_text
from tradematch.types import CatalogueItem, MatchQuery, ScoredCandidate

WEAK_MATCH = "Weak match"


def round_score(value: float) -> float:
    """Round half up to one decimal."""
    return math.floor(value * 10 + 0.5) / 10


def keyword_score(
    intake_tokens: Sequence[str],
    tags: Sequence[str],
    search_text: str,
) -> tuple[float, list[str]]:
    """Share of intake tokens found in the item's tags or text, 0-100."""
    if not intake_tokens:
        return 0.0, []

    matched: list[str] = []
    for token in intake_tokens:
        in_tags = any(token in tag or tag in token for tag in tags)
        if in_tags or token in search_text:
            matched.append(token)

    return len(matched) / len(intake_tokens) * 100, matched


def applied_boosts(
    item: CatalogueItem,
    query: MatchQuery,
    rules: Sequence[BoostRule],
) -> list[BoostRule]:
    return [rule for rule in rules if rule.applies(item, query)]


def explain(
    matched_keywords: Sequence[str],
    fuzzy_score: float,
    boost_labels: Sequence[str],
    config: ExplanationConfig | None = None,
) -> str:
    """Short human-readable reason for a match."""
    config = config or ExplanationConfig()
    reasons: list[str] = []

    if matched_keywords:
        shown = ", ".join(matched_keywords[: config.max_keywords])
        extra = len(matched_keywords) - config.max_keywords
        more = f" +{extra} more" if extra > 0 else ""
        reasons.append(f"Matched: {shown}{more}")

    if fuzzy_score > config.high_similarity:
        reasons.append("High text similarity")
    elif fuzzy_score > config.partial_similarity:
        reasons.append("Partial text match")

    for label in boost_labels:
        reasons.append(f"Boosted: {label}")

    return " | ".join(reasons) or WEAK_MATCH


def score_item(
    item: CatalogueItem,
    intake_tokens: Sequence[str],
    fuzzy_score: float,
    query: MatchQuery,
    config: MatchConfig | None = None,
) -> ScoredCandidate | None:
    """Score one item. Returns None when the combined score is 0."""
    config = config or MatchConfig()
    weights = config.scoring

    text = searchable_text(item.short_name, item.description, item.category_name)
    kw_score, matched = keyword_score(intake_tokens, item.tags, text)

    boosts = applied_boosts(item, query, config.boost_rules)
    boost_score = min(100.0, max((rule.score for rule in boosts), default=0.0))

    total = (
        weights.keyword * kw_score
        + weights.fuzzy * fuzzy_score
        + weights.category * boost_score
    )
    if total <= 0:
        return None

    return ScoredCandidate(
        position=item.position,
        short_name=item.short_name,
        unit=item.unit,
        score=round_score(total),
        keyword_score=kw_score,
        fuzzy_score=fuzzy_score,
        boost_score=boost_score,
        matched_keywords=matched,
        category_boost=bool(boosts),
        why=explain(matched, fuzzy_score, [rule.label for rule in boosts], config.explanation),
    )
