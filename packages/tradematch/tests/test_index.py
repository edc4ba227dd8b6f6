"""Tests for the fuzzy similarity index."""

import pytest

from tradematch.config import FuzzyConfig
from tradematch.errors import NoSimilarityIndexAvailable
from tradematch.index import FuzzyIndex


def test_build_empty_raises():
    index = FuzzyIndex()
    with pytest.raises(NoSimilarityIndexAvailable):
        index.build([])
    assert not index.is_built


def test_search_unbuilt_raises():
    with pytest.raises(NoSimilarityIndexAvailable):
        FuzzyIndex().search("water")


def test_exact_short_name(sample_items):
    index = FuzzyIndex()
    index.build(sample_items)
    scores = index.search("Repair water pipe")
    assert scores["4001"] == 100.0


def test_field_length_not_penalized(sample_items):
    index = FuzzyIndex()
    index.build(sample_items)
    # all query tokens occur in the (longer) description of 8501
    scores = index.search("emulsion walls")
    assert scores["8501"] == 100.0


def test_word_order_ignored(sample_items):
    index = FuzzyIndex()
    index.build(sample_items)
    assert index.search("pipe water repair")["4001"] == 100.0


def test_typo_tolerated(sample_items):
    index = FuzzyIndex()
    index.build(sample_items)
    scores = index.search("scafolding")
    assert scores["0301"] > 80


def test_no_similarity_is_absent(sample_items):
    index = FuzzyIndex()
    index.build(sample_items)
    assert index.search("zzzz qqqq") == {}


def test_empty_query(sample_items):
    index = FuzzyIndex()
    index.build(sample_items)
    assert index.search("") == {}
    assert index.search("?!") == {}


def test_threshold_excludes_items(sample_items):
    index = FuzzyIndex(FuzzyConfig(min_similarity=100))
    index.build(sample_items)
    scores = index.search("repair")
    assert scores == {"4001": 100.0, "9001": 100.0}


def test_scores_in_range(sample_items):
    index = FuzzyIndex()
    index.build(sample_items)
    for query in ["water damage roof painting scaffolding", "need work done", "Dach undicht"]:
        for score in index.search(query).values():
            assert 0 < score <= 100
