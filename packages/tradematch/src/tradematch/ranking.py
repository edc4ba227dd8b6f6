"""Deduplication, ordering and truncation of scored candidates."""

from __future__ import annotations

from typing import Iterable

from tradematch.types import MatchResult, ScoredCandidate

DEFAULT_TOP_N = 15


def dedupe(candidates: Iterable[ScoredCandidate]) -> list[ScoredCandidate]:
    """Keep one candidate per position, the higher-scoring one (first on ties)."""
    best: dict[str, ScoredCandidate] = {}
    for cand in candidates:
        existing = best.get(cand.position)
        if existing is None or cand.score > existing.score:
            best[cand.position] = cand
    return list(best.values())


def rank_candidates(
    candidates: Iterable[ScoredCandidate],
    top_n: int = DEFAULT_TOP_N,
) -> list[MatchResult]:
    """Dedupe, sort by score descending (position ascending on ties), cut to top_n."""
    if top_n < 0:
        raise ValueError(f"top_n must be >= 0, got {top_n}")

    unique = dedupe(candidates)
    unique.sort(key=lambda c: (-c.score, c.position))
    return [c.to_result() for c in unique[:top_n]]
