"""Catalogue loading, intake batch reading and result export."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Sequence

import pandas as pd

from tradematch.catalogue import catalogue_from_dict
from tradematch.config import catalogue_path
from tradematch.errors import MalformedCatalogue
from tradematch.types import Catalogue, MatchQuery, MatchResult

RESULT_COLUMNS = [
    "position", "shortName", "unit", "score", "why",
    "matchedKeywords", "fuzzyScore", "categoryBoost",
]

_TRUE = {"1", "true", "yes", "y", "ja", "x"}


def load_catalogue(path: str | Path | None = None) -> Catalogue:
    """Load a catalogue JSON document. Defaults to the configured catalogue."""
    path = Path(path) if path is not None else catalogue_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MalformedCatalogue(f"invalid JSON: {e}", str(path)) from e
    return catalogue_from_dict(data)


def _parse_flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE


def read_intakes(
    path: str | Path,
    description_column: str = "description",
    flag_column: str = "difficult_access",
) -> list[MatchQuery]:
    """Read intake descriptions from CSV or JSONL for batch matching.

    Rows with an empty description are skipped. A JSONL line that is not an
    object raises ValueError.
    """
    path = Path(path)
    rows: list[dict] = []
    if path.suffix == ".jsonl":
        with path.open(encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                row = json.loads(line)
                if not isinstance(row, dict):
                    raise ValueError(f"{path}:{lineno}: expected a JSON object per line")
                rows.append(row)
    else:
        with path.open(newline="", encoding="utf-8") as f:
            rows.extend(csv.DictReader(f))

    queries: list[MatchQuery] = []
    for row in rows:
        description = str(row.get(description_column) or "").strip()
        if not description:
            continue
        queries.append(MatchQuery(
            description=description,
            difficult_access=_parse_flag(row.get(flag_column)),
        ))
    return queries


def filter_results(
    results: Sequence[MatchResult],
    query: str = "",
    descending: bool = True,
) -> list[MatchResult]:
    """Case-insensitive contains filter over position, short name and reason."""
    filtered = list(results)
    if query:
        q = query.lower()
        filtered = [
            r for r in filtered
            if q in r.position.lower() or q in r.short_name.lower() or q in r.why.lower()
        ]
    return sorted(filtered, key=lambda r: r.score, reverse=descending)


def results_frame(results: Sequence[MatchResult]) -> pd.DataFrame:
    rows = []
    for r in results:
        record = r.to_record()
        record["matchedKeywords"] = "|".join(r.matched_keywords)
        record["fuzzyScore"] = round(r.fuzzy_score, 1)
        rows.append(record)
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def write_results(results: Sequence[MatchResult], path: str | Path) -> None:
    """Write results as .json (records), .csv or .xlsx."""
    path = Path(path)

    if path.suffix == ".json":
        _write_json(results, path)
    elif path.suffix == ".xlsx":
        results_frame(results).to_excel(path, index=False)
    else:
        _write_csv(results, path)


def _write_json(results: Sequence[MatchResult], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump([r.to_record() for r in results], f, indent=2, ensure_ascii=False)
        f.write("\n")


def _write_csv(results: Sequence[MatchResult], path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_COLUMNS)
        writer.writeheader()
        for r in results:
            writer.writerow({
                "position": r.position,
                "shortName": r.short_name,
                "unit": r.unit,
                "score": f"{r.score:.1f}",
                "why": r.why,
                "matchedKeywords": "|".join(r.matched_keywords),
                "fuzzyScore": f"{r.fuzzy_score:.1f}",
                "categoryBoost": r.category_boost,
            })
