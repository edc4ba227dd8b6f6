"""Text normalization and token extraction."""

from __future__ import annotations

import re
import unicodedata

from tradematch.lexicon import Lexicon, default_lexicon

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

MIN_TOKEN_LENGTH = 2


def normalize_text(text: str) -> str:
    """Normalize text into a comparable form.

    Lowercase, strip diacritics (ü -> u), expand ß to ss, turn punctuation
    into spaces and collapse whitespace.
    """
    # 1. Lowercase before folding so uppercase umlauts are caught too
    s = text.lower()

    # 2. Decompose and drop combining marks
    s = unicodedata.normalize("NFD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))

    # 3. Sharp s is a digraph substitution, not a diacritic
    s = s.replace("ß", "ss")

    # 4. Anything but letters, digits and underscore becomes a space
    s = _NON_WORD.sub(" ", s)

    # 5. Collapse whitespace
    return _WHITESPACE.sub(" ", s).strip()


def searchable_text(short_name: str, description: str, category_name: str) -> str:
    """Normalized concatenation of the text fields of a catalogue item."""
    return normalize_text(f"{short_name} {description} {category_name}")


class Tokenizer:
    """Extracts significant tokens and expands German terms into English."""

    def __init__(self, lexicon: Lexicon | None = None) -> None:
        self.lexicon = lexicon or default_lexicon()

    def extract(self, text: str) -> list[str]:
        """Return unique tokens in order of first discovery."""
        tokens: dict[str, None] = {}
        stop_words = self.lexicon.stop_words
        synonyms = self.lexicon.synonyms

        for word in normalize_text(text).split(" "):
            if len(word) < MIN_TOKEN_LENGTH or word in stop_words:
                continue

            tokens.setdefault(word, None)

            for phrase in synonyms.get(word, ()):
                for sub_word in phrase.split(" "):
                    if len(sub_word) >= MIN_TOKEN_LENGTH:
                        tokens.setdefault(sub_word, None)

        return list(tokens)


_DEFAULT_TOKENIZER: Tokenizer | None = None


def extract_tokens(text: str, lexicon: Lexicon | None = None) -> list[str]:
    """Extract tokens with the given lexicon, or the built-in one."""
    global _DEFAULT_TOKENIZER
    if lexicon is not None:
        return Tokenizer(lexicon).extract(text)
    if _DEFAULT_TOKENIZER is None:
        _DEFAULT_TOKENIZER = Tokenizer()
    return _DEFAULT_TOKENIZER.extract(text)
