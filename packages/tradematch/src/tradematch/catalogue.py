"""Catalogue parsing and flattening into searchable items."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Iterable

import structlog

from tradematch.errors import MalformedCatalogue
from tradematch.normalize import Tokenizer
from tradematch.types import Catalogue, CatalogueItem, Position, Trade

log = structlog.get_logger()

REQUIRED_TRADE_FIELDS = ("code", "name_en")
REQUIRED_POSITION_FIELDS = ("position_number", "short_name_en", "description_en", "unit")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def catalogue_from_dict(data: Any) -> Catalogue:
    """Build a typed Catalogue from a decoded JSON document.

    Only the shape is checked here; field content is validated by
    flatten_catalogue.
    """
    if not isinstance(data, dict) or not isinstance(data.get("trades"), list):
        raise MalformedCatalogue("expected an object with a 'trades' list")

    trades: list[Trade] = []
    for t_idx, raw_trade in enumerate(data["trades"]):
        if not isinstance(raw_trade, dict):
            raise MalformedCatalogue("trade must be an object", f"trades[{t_idx}]")

        raw_positions = raw_trade.get("positions") or []
        if not isinstance(raw_positions, list):
            raise MalformedCatalogue(
                "positions must be a list", f"trades[{t_idx}].positions"
            )

        positions: list[Position] = []
        for p_idx, raw in enumerate(raw_positions):
            if not isinstance(raw, dict):
                raise MalformedCatalogue(
                    "position must be an object", f"trades[{t_idx}].positions[{p_idx}]"
                )
            hero = raw.get("hero")
            if hero is not None and not isinstance(hero, bool):
                raise MalformedCatalogue(
                    f"hero must be a boolean, got {hero!r}",
                    f"trades[{t_idx}].positions[{p_idx}].hero",
                )
            positions.append(Position(
                position_number=_text(raw.get("position_number")),
                short_name_de=_text(raw.get("short_name_de")),
                short_name_en=_text(raw.get("short_name_en")),
                unit=_text(raw.get("unit")),
                description_de=_text(raw.get("description_de")),
                description_en=_text(raw.get("description_en")),
                hero=bool(hero),
            ))

        trades.append(Trade(
            code=_text(raw_trade.get("code")),
            name_de=_text(raw_trade.get("name_de")),
            name_en=_text(raw_trade.get("name_en")),
            positions=tuple(positions),
        ))

    return Catalogue(trades=tuple(trades))


def _trade_problem(trade: Trade) -> str | None:
    for name in REQUIRED_TRADE_FIELDS:
        if not getattr(trade, name):
            return f"missing required field '{name}'"
    if not trade.positions:
        return "trade has no positions"
    return None


def _position_problem(position: Position, seen: set[str]) -> str | None:
    for name in REQUIRED_POSITION_FIELDS:
        if not getattr(position, name):
            return f"missing required field '{name}'"
    if position.position_number in seen:
        return f"duplicate position_number '{position.position_number}'"
    return None


def flatten_catalogue(
    catalogue: Catalogue,
    *,
    strict: bool = True,
    tokenizer: Tokenizer | None = None,
) -> list[CatalogueItem]:
    """Flatten trades -> positions into CatalogueItems, in catalogue order.

    With strict=True any structural problem raises MalformedCatalogue.
    Otherwise the offending trade or position is skipped with a warning.
    """
    tokenizer = tokenizer or Tokenizer()
    items: list[CatalogueItem] = []
    seen: set[str] = set()
    skipped = 0

    for t_idx, trade in enumerate(catalogue.trades):
        problem = _trade_problem(trade)
        if problem:
            if strict:
                raise MalformedCatalogue(problem, f"trades[{t_idx}]")
            log.warning("catalogue_trade_skipped", trade=trade.code, reason=problem)
            skipped += 1
            continue

        for p_idx, position in enumerate(trade.positions):
            problem = _position_problem(position, seen)
            if problem:
                if strict:
                    raise MalformedCatalogue(problem, f"trades[{t_idx}].positions[{p_idx}]")
                log.warning(
                    "catalogue_position_skipped",
                    trade=trade.code,
                    position=position.position_number,
                    reason=problem,
                )
                skipped += 1
                continue

            seen.add(position.position_number)
            tag_text = f"{position.short_name_en} {position.description_en} {trade.name_en}"
            items.append(CatalogueItem(
                position=position.position_number,
                short_name=position.short_name_en,
                unit=position.unit,
                description=position.description_en,
                category=trade.code,
                category_name=trade.name_en,
                tags=tuple(tokenizer.extract(tag_text)),
                hero=position.hero,
            ))

    log.debug("catalogue_flattened", items=len(items), skipped=skipped)
    return items


def catalogue_fingerprint(items: Iterable[CatalogueItem]) -> str:
    """Stable content hash of flattened items, used as the snapshot version."""
    digest = hashlib.sha256()
    for item in items:
        record = [
            item.position, item.short_name, item.unit, item.description,
            item.category, item.category_name, list(item.tags), item.hero,
        ]
        digest.update(json.dumps(record, ensure_ascii=False).encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()
