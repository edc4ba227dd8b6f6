"""Bilingual (German/English) synonym and stop-word tables.

The tables are plain data. ``Lexicon`` wraps them in an immutable value that
the tokenizer receives at construction time; ``load_lexicon`` reads an
alternate lexicon from JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

# German term -> English equivalents. Keys may carry umlauts/sharp-s; they are
# normalized when a Lexicon is built.
DE_EN_SYNONYMS: dict[str, list[str]] = {
    # Water / plumbing
    "wasser": ["water", "pipe", "plumbing"],
    "wasserschaden": ["water damage", "leak", "flooding"],
    "rohr": ["pipe", "tube"],
    "leitung": ["pipe", "line", "cable"],
    "wasserhahn": ["faucet", "tap"],
    "toilette": ["toilet", "wc", "bathroom"],
    "bad": ["bathroom", "bath"],
    "sanitär": ["plumbing", "sanitary"],
    # Roof
    "dach": ["roof", "roofing"],
    "dachreparatur": ["roof repair"],
    "dachrinne": ["gutter", "gutters"],
    "ziegel": ["tile", "tiles", "shingle"],
    "undicht": ["leak", "leaking", "leaky"],
    # Painting
    "streichen": ["paint", "painting"],
    "farbe": ["paint", "color"],
    "anstrich": ["painting", "coat"],
    "tapete": ["wallpaper"],
    "wand": ["wall"],
    "decke": ["ceiling"],
    # Electrical
    "strom": ["electricity", "electrical", "power"],
    "steckdose": ["outlet", "socket", "power outlet"],
    "schalter": ["switch", "light switch"],
    "lampe": ["lamp", "light"],
    "kabel": ["cable", "wire"],
    # Construction / general
    "reparatur": ["repair", "fix"],
    "reparieren": ["repair", "fix"],
    "baustelle": ["construction site", "site"],
    "gerüst": ["scaffolding", "scaffold"],
    "zugang": ["access"],
    "schwer": ["difficult", "hard", "heavy"],
    "beschädigt": ["damaged", "broken"],
    "schaden": ["damage"],
    "erneuern": ["renew", "replace", "renovation"],
    "austauschen": ["replace", "exchange"],
    "installieren": ["install", "installation"],
    "einbauen": ["install", "fit"],
    # Earthworks
    "erde": ["earth", "soil", "ground"],
    "graben": ["dig", "excavate", "trench"],
    "aushub": ["excavation"],
    "bagger": ["excavator", "digger"],
    # Materials
    "holz": ["wood", "timber"],
    "beton": ["concrete"],
    "putz": ["plaster", "render"],
    "fliese": ["tile"],
    "dämmung": ["insulation"],
}

STOP_WORDS: frozenset[str] = frozenset({
    # English
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "shall", "can", "need",
    "we", "you", "i", "he", "she", "it", "they", "them", "their", "our",
    "my", "your", "his", "her", "its", "this", "that", "these", "those",
    "there", "here", "where", "when", "what", "which", "who", "whom",
    "some", "any", "no", "not", "all", "each", "every", "both", "few",
    "more", "most", "other", "into", "through", "during", "before",
    "after", "above", "below", "between", "under", "again", "further",
    "then", "once", "also", "just", "only", "very", "too", "so",
    # German
    "der", "die", "das", "ein", "eine", "und", "oder", "aber", "auf",
    "zu", "für", "von", "mit", "bei", "nach", "aus", "um", "über",
    "ist", "sind", "war", "waren", "sein", "haben", "hat", "hatte",
    "wir", "sie", "er", "es", "ich", "du", "ihr", "uns", "euch",
    "mein", "dein", "unser", "euer",
    "dieser", "diese", "dieses", "jener", "jene", "jenes",
    "hier", "dort", "wo", "wann", "wer", "wie", "warum",
    "nicht", "kein", "keine", "keiner", "alle", "jeder", "jede", "jedes",
    "noch", "schon", "auch", "nur", "sehr", "dann", "wenn",
})


@dataclass(frozen=True)
class Lexicon:
    """Immutable synonym table and stop-word set, keyed by normalized words."""

    synonyms: Mapping[str, tuple[str, ...]]
    stop_words: frozenset[str]

    @classmethod
    def build(
        cls,
        synonyms: Mapping[str, Iterable[str]],
        stop_words: Iterable[str],
    ) -> Lexicon:
        from tradematch.normalize import normalize_text

        table: dict[str, tuple[str, ...]] = {}
        for term, phrases in synonyms.items():
            key = normalize_text(term)
            if not key:
                continue
            merged = list(table.get(key, ()))
            for phrase in phrases:
                phrase = normalize_text(phrase)
                if phrase and phrase not in merged:
                    merged.append(phrase)
            table[key] = tuple(merged)

        stops = frozenset(w for w in (normalize_text(s) for s in stop_words) if w)
        return cls(synonyms=MappingProxyType(table), stop_words=stops)


_DEFAULT: Lexicon | None = None


def default_lexicon() -> Lexicon:
    """The built-in bilingual lexicon (built once)."""
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = Lexicon.build(DE_EN_SYNONYMS, STOP_WORDS)
    return _DEFAULT


def load_lexicon(path: str | Path) -> Lexicon:
    """Load a lexicon from JSON: {"synonyms": {...}, "stop_words": [...]}.

    Missing sections fall back to the built-in tables.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return Lexicon.build(
        data.get("synonyms", DE_EN_SYNONYMS),
        data.get("stop_words", STOP_WORDS),
    )
