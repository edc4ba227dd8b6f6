"""Tests for the deterministic scoring module."""

import pytest

from tradematch.config import BoostRule, ExplanationConfig, MatchConfig
from tradematch.normalize import searchable_text
from tradematch.scoring import explain, keyword_score, round_score, score_item
from tradematch.types import MatchQuery


def _item(items, position):
    return next(i for i in items if i.position == position)


class TestKeywordScore:

    def test_partial_overlap(self, sample_items):
        item = _item(sample_items, "4001")
        text = searchable_text(item.short_name, item.description, item.category_name)
        score, matched = keyword_score(["water", "pipe", "leaking"], item.tags, text)
        assert matched == ["water", "pipe"]
        assert score == pytest.approx(200 / 3)

    def test_token_inside_tag(self):
        score, matched = keyword_score(["paint"], ("painting",), "")
        assert matched == ["paint"]
        assert score == 100.0

    def test_tag_inside_token(self):
        score, matched = keyword_score(["painted"], ("paint",), "")
        assert matched == ["painted"]

    def test_search_text_only(self):
        score, matched = keyword_score(["pipe"], (), "repair water pipe")
        assert matched == ["pipe"]

    def test_discovery_order_kept(self):
        _, matched = keyword_score(["roof", "water", "pipe"], ("pipe", "water"), "")
        assert matched == ["water", "pipe"]

    def test_no_tokens(self):
        assert keyword_score([], ("water",), "water") == (0.0, [])


class TestExplain:

    def test_keywords_and_high_similarity(self):
        assert explain(["water", "pipe"], 60, []) == "Matched: water, pipe | High text similarity"

    def test_more_than_three_keywords(self):
        why = explain(["a1", "b2", "c3", "d4", "e5"], 0, [])
        assert why == "Matched: a1, b2, c3 +2 more"

    def test_exactly_three_keywords(self):
        assert explain(["a1", "b2", "c3"], 0, []) == "Matched: a1, b2, c3"

    def test_partial_similarity(self):
        assert explain([], 30, []) == "Partial text match"

    def test_thresholds_are_exclusive(self):
        assert explain([], 50, []) == "Partial text match"
        assert explain([], 20, []) == "Weak match"

    def test_boost_last(self):
        why = explain(["roof"], 55, ["difficult access"])
        assert why == "Matched: roof | High text similarity | Boosted: difficult access"

    def test_weak_match(self):
        assert explain([], 0, []) == "Weak match"

    def test_custom_config(self):
        config = ExplanationConfig(max_keywords=1, high_similarity=90, partial_similarity=10)
        assert explain(["a1", "b2"], 60, [], config) == "Matched: a1 +1 more | Partial text match"


def test_round_half_up():
    assert round_score(12.25) == 12.3
    assert round_score(12.24) == 12.2
    assert round_score(0.05) == 0.1
    assert round_score(100.0) == 100.0


class TestScoreItem:

    def test_weighted_combination(self, sample_items):
        item = _item(sample_items, "4001")
        sc = score_item(item, ["water", "pipe", "leaking"], 50.0, MatchQuery("water pipe leaking"))
        # 0.4 * 66.67 + 0.4 * 50 + 0.2 * 0
        assert sc.score == 46.7
        assert sc.keyword_score == pytest.approx(200 / 3)
        assert sc.fuzzy_score == 50.0
        assert sc.category_boost is False
        assert sc.why == "Matched: water, pipe | Partial text match"

    def test_zero_score_dropped(self, sample_items):
        item = _item(sample_items, "8501")
        assert score_item(item, ["xylophone"], 0.0, MatchQuery("xylophone")) is None

    def test_boost_only(self, sample_items):
        item = _item(sample_items, "0301")
        query = MatchQuery("xylophone", difficult_access=True)
        sc = score_item(item, ["xylophone"], 0.0, query)
        assert sc.score == 20.0
        assert sc.boost_score == 100.0
        assert sc.category_boost is True
        assert sc.why == "Boosted: difficult access"

    def test_boost_needs_flag(self, sample_items):
        item = _item(sample_items, "0301")
        assert score_item(item, ["xylophone"], 0.0, MatchQuery("xylophone")) is None

    def test_boost_needs_category(self, sample_items):
        item = _item(sample_items, "9001")
        query = MatchQuery("xylophone", difficult_access=True)
        assert score_item(item, ["xylophone"], 0.0, query) is None

    def test_custom_boost_rule(self, sample_items):
        config = MatchConfig(boost_rules=[
            BoostRule(category="9000", flag="storm_damage", label="storm damage", score=50.0),
        ])
        item = _item(sample_items, "9001")
        query = MatchQuery("xylophone", flags={"storm_damage": True})
        sc = score_item(item, ["xylophone"], 0.0, query, config)
        assert sc.score == 10.0
        assert sc.why == "Boosted: storm damage"

    def test_highest_boost_wins(self, sample_items):
        config = MatchConfig(boost_rules=[
            BoostRule(category="0300", flag="difficult_access", label="difficult access"),
            BoostRule(category="0300", flag="high_rise", label="high rise", score=40.0),
        ])
        item = _item(sample_items, "0301")
        query = MatchQuery("xylophone", difficult_access=True, flags={"high_rise": True})
        sc = score_item(item, ["xylophone"], 0.0, query, config)
        assert sc.boost_score == 100.0
        assert sc.why == "Boosted: difficult access | Boosted: high rise"

    def test_score_never_exceeds_100(self, sample_items):
        item = _item(sample_items, "0301")
        query = MatchQuery("erect scaffolding", difficult_access=True)
        sc = score_item(item, ["erect", "scaffolding"], 100.0, query)
        assert sc.score == 100.0

    def test_custom_weights(self, sample_items):
        config = MatchConfig()
        config.scoring.keyword = 1.0
        config.scoring.fuzzy = 0.0
        item = _item(sample_items, "4001")
        sc = score_item(item, ["water", "roof"], 90.0, MatchQuery("water roof"), config)
        assert sc.score == 50.0
