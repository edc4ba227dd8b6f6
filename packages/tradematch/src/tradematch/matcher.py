"""Main orchestration: tokenization, fuzzy search, scoring, ranking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import structlog

from tradematch.catalogue import catalogue_fingerprint, flatten_catalogue
from tradematch.config import FuzzyConfig, MatchConfig
from tradematch.errors import NoSimilarityIndexAvailable
from tradematch.index import FuzzyIndex, SimilarityIndex
from tradematch.lexicon import Lexicon
from tradematch.normalize import Tokenizer
from tradematch.ranking import rank_candidates
from tradematch.scoring import score_item
from tradematch.types import Catalogue, CatalogueItem, MatchQuery, MatchResult, ScoredCandidate

log = structlog.get_logger()


@dataclass
class MatcherStats:
    """Statistics collected during matching."""

    queries: int = 0
    empty_queries: int = 0
    items_scored: int = 0
    candidates: int = 0
    results_returned: int = 0
    index_builds: int = 0
    index_unavailable: int = 0


@dataclass(frozen=True)
class CatalogueSnapshot:
    """Flattened items and the index built over exactly those items."""

    items: tuple[CatalogueItem, ...]
    index: SimilarityIndex | None
    fingerprint: str
    version: int


class ServiceMatcher:
    """Matches intake descriptions against one catalogue snapshot at a time.

    load() builds a new snapshot and swaps it in with a single assignment, so
    a query always sees items and index from the same catalogue.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        lexicon: Lexicon | None = None,
        index_factory: Callable[[FuzzyConfig], SimilarityIndex] = FuzzyIndex,
    ) -> None:
        self.config = config or MatchConfig()
        self.tokenizer = Tokenizer(lexicon)
        self.index_factory = index_factory
        self.stats = MatcherStats()
        self._snapshot = CatalogueSnapshot(items=(), index=None, fingerprint="", version=0)

    @property
    def items(self) -> tuple[CatalogueItem, ...]:
        return self._snapshot.items

    @property
    def snapshot(self) -> CatalogueSnapshot:
        return self._snapshot

    def load(self, catalogue: Catalogue) -> list[CatalogueItem]:
        """Flatten the catalogue and build its similarity index."""
        log.info("flatten_catalogue_start", trades=len(catalogue.trades))
        items = flatten_catalogue(
            catalogue,
            strict=self.config.catalogue.strict,
            tokenizer=self.tokenizer,
        )
        self.load_items(items)
        return items

    def load_items(self, items: Sequence[CatalogueItem]) -> None:
        """Use already-flattened items as the new snapshot."""
        items = tuple(items)
        index: SimilarityIndex | None = self.index_factory(self.config.fuzzy)
        try:
            index.build(items)
            self.stats.index_builds += 1
        except NoSimilarityIndexAvailable as e:
            log.warning("similarity_index_unavailable", reason=str(e), items=len(items))
            self.stats.index_unavailable += 1
            index = None

        snapshot = CatalogueSnapshot(
            items=items,
            index=index,
            fingerprint=catalogue_fingerprint(items),
            version=self._snapshot.version + 1,
        )
        self._snapshot = snapshot
        log.info(
            "catalogue_loaded",
            items=len(items),
            version=snapshot.version,
            fingerprint=snapshot.fingerprint[:12],
            index=index is not None,
        )

    def match(
        self,
        description: str,
        difficult_access: bool = False,
        top_n: int | None = None,
        flags: dict[str, bool] | None = None,
    ) -> list[MatchResult]:
        """Rank the catalogue for one intake description."""
        query = MatchQuery(
            description=description,
            difficult_access=difficult_access,
            top_n=top_n,
            flags=dict(flags or {}),
        )
        return self.match_query(query)

    def match_query(self, query: MatchQuery) -> list[MatchResult]:
        top_n = self.config.ranking.top_n if query.top_n is None else query.top_n
        if top_n < 0:
            raise ValueError(f"top_n must be >= 0, got {top_n}")

        snapshot = self._snapshot
        self.stats.queries += 1

        intake_tokens = self.tokenizer.extract(query.description)
        log.debug("intake_tokens", tokens=intake_tokens, difficult_access=query.difficult_access)
        if not intake_tokens:
            self.stats.empty_queries += 1
            log.debug("empty_query")
            return []

        fuzzy_scores = snapshot.index.search(query.description) if snapshot.index else {}
        log.debug("fuzzy_search_done", hits=len(fuzzy_scores))

        candidates: list[ScoredCandidate] = []
        for item in snapshot.items:
            sc = score_item(
                item,
                intake_tokens,
                fuzzy_scores.get(item.position, 0.0),
                query,
                self.config,
            )
            if sc is not None:
                candidates.append(sc)

        results = rank_candidates(candidates, top_n)

        self.stats.items_scored += len(snapshot.items)
        self.stats.candidates += len(candidates)
        self.stats.results_returned += len(results)
        log.debug(
            "match_done",
            tokens=len(intake_tokens),
            candidates=len(candidates),
            returned=len(results),
            best=results[0].position if results else None,
            best_score=results[0].score if results else None,
        )
        return results

    def match_all(self, queries: Sequence[MatchQuery]) -> list[list[MatchResult]]:
        """Match several intakes against the current snapshot."""
        results: list[list[MatchResult]] = []
        for i, query in enumerate(queries):
            results.append(self.match_query(query))
            if (i + 1) % 100 == 0:
                log.info("match_progress", processed=i + 1, total=len(queries))
        return results


def match_services(
    description: str,
    difficult_access: bool,
    catalogue: Catalogue | Sequence[CatalogueItem],
    top_n: int | None = None,
    config: MatchConfig | None = None,
) -> list[MatchResult]:
    """Stateless entry point: build a matcher for the catalogue and run one query."""
    matcher = ServiceMatcher(config)
    if isinstance(catalogue, Catalogue):
        matcher.load(catalogue)
    else:
        matcher.load_items(catalogue)
    return matcher.match(description, difficult_access, top_n)
