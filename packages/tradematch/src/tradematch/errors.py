"""Errors raised by the matching engine."""

from __future__ import annotations


class MatchError(Exception):
    """Base class for tradematch errors."""


class MalformedCatalogue(MatchError):
    """The catalogue violates its structural invariants."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class NoSimilarityIndexAvailable(MatchError):
    """The fuzzy similarity index could not be built or was never built."""
