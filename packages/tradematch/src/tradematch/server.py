"""FastAPI server exposing the matching engine."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog
from fastapi import FastAPI, Query
from pydantic import BaseModel

from tradematch.config import MatchConfig
from tradematch.intake import IntakeForm
from tradematch.io import filter_results, load_catalogue
from tradematch.matcher import ServiceMatcher

log = structlog.get_logger()


class TradeEntry(BaseModel):
    code: str
    name_de: str
    name_en: str
    positions: int


class CatalogueInfo(BaseModel):
    items: int
    fingerprint: str
    trades: list[TradeEntry]


class ItemEntry(BaseModel):
    position: str
    shortName: str
    unit: str
    category: str
    categoryName: str
    hero: bool


class ResultEntry(BaseModel):
    position: str
    shortName: str
    unit: str
    score: float
    why: str
    matchedKeywords: list[str]
    fuzzyScore: float
    categoryBoost: bool


class MatchResponse(BaseModel):
    count: int
    total: int
    results: list[ResultEntry]


def create_app(
    catalogue_path: str | Path | None = None,
    config: MatchConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application around one catalogue snapshot."""
    app = FastAPI(title="tradematch")

    log.info("server_loading_catalogue", path=str(catalogue_path) if catalogue_path else "default")
    catalogue = load_catalogue(catalogue_path)
    matcher = ServiceMatcher(config)
    matcher.load(catalogue)

    trades = [
        TradeEntry(
            code=t.code,
            name_de=t.name_de,
            name_en=t.name_en,
            positions=len(t.positions),
        )
        for t in catalogue.trades
    ]
    log.info("server_catalogue_loaded", items=len(matcher.items), trades=len(trades))

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/catalogue")
    async def get_catalogue() -> CatalogueInfo:
        """Catalogue summary: item count, version fingerprint and trades."""
        return CatalogueInfo(
            items=len(matcher.items),
            fingerprint=matcher.snapshot.fingerprint,
            trades=trades,
        )

    @app.get("/api/catalogue/items")
    async def get_items(q: str = "") -> list[ItemEntry]:
        """Flattened catalogue items, optionally filtered by query."""
        q_lower = q.lower()
        return [
            ItemEntry(
                position=item.position,
                shortName=item.short_name,
                unit=item.unit,
                category=item.category,
                categoryName=item.category_name,
                hero=item.hero,
            )
            for item in matcher.items
            if not q_lower
            or q_lower in item.position.lower()
            or q_lower in item.short_name.lower()
            or q_lower in item.category_name.lower()
        ]

    @app.post("/api/match")
    async def match(
        intake: IntakeForm,
        top_n: int | None = Query(default=None, ge=0),
        q: str = "",
        order: Literal["asc", "desc"] = "desc",
    ) -> MatchResponse:
        """Run matching for a validated intake form."""
        results = matcher.match(intake.description, intake.difficult_access, top_n)
        shown = filter_results(results, q, descending=order == "desc")
        log.info(
            "api_match",
            difficult_access=intake.difficult_access,
            total=len(results),
            shown=len(shown),
        )
        return MatchResponse(
            count=len(shown),
            total=len(results),
            results=[ResultEntry(**r.to_record()) for r in shown],
        )

    return app
